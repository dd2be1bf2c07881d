import customtkinter as ctk
from tkcalendar import Calendar
import tkinter as tk
from tkinter import ttk
from utils.date_helpers import parse_date, format_date, format_display_date, parse_display_date
from datetime import date


class DatePickerWidget(ctk.CTkFrame):
    """Date entry (in the user's display format) with a calendar popup button.

    .get() returns a datetime.date, or None when the entry is empty or invalid.
    """

    def __init__(
        self,
        master,
        initial_date: date | None = None,
        date_format: str = "MM/DD/YYYY",
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self.grid_columnconfigure(0, weight=1)

        self._date_format = date_format
        self._popup: ctk.CTkToplevel | None = None
        self._var = tk.StringVar(value=self._display(initial_date))

        self._entry = ctk.CTkEntry(self, textvariable=self._var, width=120)
        self._entry.grid(row=0, column=0, sticky="ew")
        self._entry.bind("<FocusOut>", self._on_focus_out)
        self._entry.bind("<Return>", self._on_focus_out)

        ctk.CTkButton(
            self, text="📅", width=32, command=self._toggle_popup
        ).grid(row=0, column=1, padx=(4, 0))

    def get(self) -> date | None:
        return self._parse_raw(self._var.get())

    def set(self, d: date | None):
        self._var.set(self._display(d))
        self._reset_border()

    def is_valid(self) -> bool:
        return self.get() is not None

    def is_empty(self) -> bool:
        return not self._var.get().strip()

    def _display(self, d: date | None) -> str:
        return format_display_date(format_date(d), self._date_format) if d else ""

    def _parse_raw(self, raw: str) -> date | None:
        raw = raw.strip()
        if not raw:
            return None
        d = parse_display_date(raw, self._date_format)
        if d is None:
            d = parse_date(raw.replace("/", "-").replace(".", "-"))
        return d

    def _on_focus_out(self, _event=None):
        raw = self._var.get().strip()
        if not raw:
            self._reset_border()
            return
        d = self._parse_raw(raw)
        if d:
            self.set(d)
        else:
            self._entry.configure(border_color="#F44336")

    def _reset_border(self):
        self._entry.configure(border_color=("gray65", "gray35"))

    def _toggle_popup(self):
        if self._popup and self._popup.winfo_exists():
            self._close_popup()
            return

        popup = ctk.CTkToplevel(self)
        popup.overrideredirect(True)
        popup.resizable(False, False)
        self._popup = popup

        # Theme the calendar to match CTk appearance
        if ctk.get_appearance_mode() == "Dark":
            bg, fg = "#2b2b2b", "#ffffff"
        else:
            bg, fg = "#ffffff", "#000000"
        style = ttk.Style(popup)
        style.theme_use("default")
        style.configure("Calendar.Treeview", background=bg, foreground=fg, fieldbackground=bg)

        current = self.get() or date.today()

        # Calendar works in yyyy-mm-dd; the entry shows the display format
        cal = Calendar(
            popup,
            selectmode="day",
            year=current.year,
            month=current.month,
            day=current.day,
            date_pattern="yyyy-mm-dd",
            firstweekday="sunday",
            background=bg,
            foreground=fg,
            headersbackground=bg,
            headersforeground=fg,
            selectbackground="#1f6aa5",
            weekendbackground=bg,
            weekendforeground=fg,
            othermonthforeground="gray60",
            bordercolor=bg,
        )
        cal.pack(padx=4, pady=4)
        cal.bind("<<CalendarSelected>>", lambda e: self._on_date_selected(cal))

        self._entry.update_idletasks()
        x = self._entry.winfo_rootx()
        y = self._entry.winfo_rooty() + self._entry.winfo_height() + 2
        popup.geometry(f"+{x}+{y}")

        popup.bind("<FocusOut>", lambda e: self._maybe_close())

    def _on_date_selected(self, cal):
        d = parse_date(cal.get_date())
        if d:
            self.set(d)
        self._close_popup()

    def _maybe_close(self):
        popup = self._popup
        if popup is None:
            return
        try:
            focused = popup.focus_get()
        except (KeyError, tk.TclError):
            focused = None
        if focused is None or not str(focused).startswith(str(popup)):
            self._close_popup()

    def _close_popup(self):
        if self._popup is not None:
            if self._popup.winfo_exists():
                self._popup.destroy()
            self._popup = None
