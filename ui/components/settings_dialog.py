import json
import customtkinter as ctk
from tkinter import filedialog, messagebox

from database.db_manager import DatabaseManager
from services.data_service import DataService
from ui.components.confirm_dialog import center_over
from utils.app_config import get_db_folder, set_db_folder
from utils.date_helpers import DATE_FORMAT_OPTIONS
from utils.logging_setup import get_logger

logger = get_logger(__name__)


class SettingsDialog(ctk.CTkToplevel):
    """DB folder, JSON export/import and display preferences."""

    def __init__(
        self,
        master,
        db: DatabaseManager,
        data_service: DataService,
        notify_refresh,
        **kwargs,
    ):
        super().__init__(master, **kwargs)
        self._db = db
        self._data_svc = data_service
        self._notify_refresh = notify_refresh

        self.title("Settings")
        self.resizable(False, False)
        self.grid_columnconfigure(0, weight=1)

        self._build_db_folder_section()
        self._build_export_import_section()
        self._build_app_settings_section()

        self.transient(master)
        self.grab_set()
        center_over(self, master)

    # ── Section 1: DB folder ──────────────────────────────────────────────────

    def _build_db_folder_section(self):
        section = self._make_section("Database Folder", row=0)

        self._db_folder_var = ctk.StringVar(value=get_db_folder() or "(default: app folder)")
        ctk.CTkEntry(
            section, textvariable=self._db_folder_var, state="readonly", width=300,
        ).grid(row=0, column=0, padx=(8, 4), pady=4, sticky="ew")

        ctk.CTkButton(
            section, text="Browse…", width=80, command=self._browse_db_folder,
        ).grid(row=0, column=1, padx=4)

        ctk.CTkButton(
            section, text="Reset", width=70,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self._reset_db_folder,
        ).grid(row=0, column=2, padx=(4, 8))

        self._db_restart_label = ctk.CTkLabel(
            section, text="", text_color="#FF9800",
            font=ctk.CTkFont(size=11), anchor="w",
        )
        self._db_restart_label.grid(row=1, column=0, columnspan=3, sticky="w", padx=8)

    def _browse_db_folder(self):
        path = filedialog.askdirectory(title="Choose DB folder", parent=self)
        if path:
            set_db_folder(path)
            self._db_folder_var.set(path)
            self._db_restart_label.configure(text="Restart the app for the change to take effect.")

    def _reset_db_folder(self):
        set_db_folder(None)
        self._db_folder_var.set("(default: app folder)")
        self._db_restart_label.configure(text="Restart the app for the change to take effect.")

    # ── Section 2: Export / Import ────────────────────────────────────────────

    def _build_export_import_section(self):
        section = self._make_section("Export / Import", row=1)
        self._io_status_var = ctk.StringVar()

        btn_frame = ctk.CTkFrame(section, fg_color="transparent")
        btn_frame.grid(row=0, column=0, sticky="w", padx=8, pady=6)

        ctk.CTkButton(
            btn_frame, text="Export as JSON", width=130, command=self._export_json,
        ).pack(side="left", padx=4)

        ctk.CTkButton(
            btn_frame, text="Import JSON…", width=120,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self._import_json,
        ).pack(side="left", padx=4)

        ctk.CTkLabel(
            section, textvariable=self._io_status_var, text_color="#4CAF50",
            font=ctk.CTkFont(size=11), anchor="w", wraplength=380,
        ).grid(row=1, column=0, sticky="w", padx=8, pady=(0, 6))

    def _export_json(self):
        path = filedialog.asksaveasfilename(
            title="Export as JSON",
            parent=self,
            defaultextension=".json",
            filetypes=[("JSON files", "*.json"), ("All files", "*.*")],
        )
        if not path:
            return
        try:
            data = self._data_svc.export_json()
            with open(path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
        except OSError as e:
            logger.exception("Export to %s failed", path)
            messagebox.showerror("Export Failed", str(e), parent=self)
            return
        self._io_status_var.set(f"Exported to {path}")

    def _import_json(self):
        path = filedialog.askopenfilename(
            title="Import JSON",
            parent=self,
            filetypes=[("JSON files", "*.json"), ("All files", "*.*")],
        )
        if not path:
            return
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            messagebox.showerror("Import Failed", f"Could not read file:\n{e}", parent=self)
            return

        mode = self._ask_import_mode()
        if not mode:
            return

        try:
            stats = self._data_svc.import_json(data, mode)
        except ValueError as e:
            logger.warning("Rejected import from %s: %s", path, e)
            messagebox.showerror("Import Failed", str(e), parent=self)
            return
        self._notify_refresh()
        count = stats["transactions"]
        self._io_status_var.set(f"Imported {count} transaction{'s' if count != 1 else ''}.")

    def _ask_import_mode(self) -> str | None:
        dlg = _ImportModeDialog(self)
        self.wait_window(dlg)
        return dlg.mode

    # ── Section 3: App settings ───────────────────────────────────────────────

    def _build_app_settings_section(self):
        section = self._make_section("App Settings", row=2)

        ctk.CTkLabel(section, text="Appearance:", anchor="e", width=120).grid(
            row=0, column=0, padx=(8, 4), pady=6, sticky="e"
        )
        appearance_raw = self._db.get_setting("appearance_mode", "system")
        self._appearance_var = ctk.StringVar(value=appearance_raw.title())
        ctk.CTkComboBox(
            section, values=["System", "Light", "Dark"],
            variable=self._appearance_var, width=180, state="readonly",
        ).grid(row=0, column=1, padx=4, pady=6, sticky="w")

        ctk.CTkLabel(section, text="Currency Symbol:", anchor="e", width=120).grid(
            row=1, column=0, padx=(8, 4), pady=6, sticky="e"
        )
        self._currency_var = ctk.StringVar(value=self._db.get_setting("currency_symbol", "$"))
        ctk.CTkEntry(section, textvariable=self._currency_var, width=60).grid(
            row=1, column=1, padx=4, pady=6, sticky="w"
        )

        ctk.CTkLabel(section, text="Date Format:", anchor="e", width=120).grid(
            row=2, column=0, padx=(8, 4), pady=6, sticky="e"
        )
        self._date_fmt_var = ctk.StringVar(value=self._db.get_setting("date_format", "MM/DD/YYYY"))
        ctk.CTkComboBox(
            section, values=DATE_FORMAT_OPTIONS,
            variable=self._date_fmt_var, width=180, state="readonly",
        ).grid(row=2, column=1, padx=4, pady=6, sticky="w")

        ctk.CTkButton(
            section, text="Save Settings", width=140, command=self._save_settings,
        ).grid(row=3, column=0, columnspan=2, pady=(10, 4))

        self._settings_status_var = ctk.StringVar()
        ctk.CTkLabel(
            section, textvariable=self._settings_status_var,
            text_color="#4CAF50", font=ctk.CTkFont(size=11),
        ).grid(row=4, column=0, columnspan=2, pady=(0, 8))

    def _save_settings(self):
        appearance_key = self._appearance_var.get().lower()
        currency = self._currency_var.get().strip() or "$"

        self._db.set_setting("appearance_mode", appearance_key)
        self._db.set_setting("currency_symbol", currency)
        self._db.set_setting("date_format", self._date_fmt_var.get())
        ctk.set_appearance_mode(appearance_key)
        self._notify_refresh()
        self._settings_status_var.set("Settings saved.")

    # ── Helpers ───────────────────────────────────────────────────────────────

    def _make_section(self, title: str, row: int) -> ctk.CTkFrame:
        """Create a labelled card section and return its inner frame."""
        outer = ctk.CTkFrame(self, corner_radius=8)
        outer.grid(row=row, column=0, sticky="ew", padx=12, pady=(12 if row == 0 else 0, 12))
        outer.grid_columnconfigure(0, weight=1)

        ctk.CTkLabel(
            outer, text=title,
            font=ctk.CTkFont(size=14, weight="bold"), anchor="w",
        ).grid(row=0, column=0, sticky="w", padx=12, pady=(10, 4))

        inner = ctk.CTkFrame(outer, fg_color="transparent")
        inner.grid(row=1, column=0, sticky="ew", padx=4, pady=(0, 8))
        inner.grid_columnconfigure(0, weight=1)
        return inner


class _ImportModeDialog(ctk.CTkToplevel):
    """Small modal asking the user to choose merge or replace import mode."""

    def __init__(self, master):
        super().__init__(master)
        self.mode: str | None = None

        self.title("Choose Import Mode")
        self.resizable(False, False)
        self.grid_columnconfigure(0, weight=1)

        ctk.CTkLabel(
            self, text="How should existing transactions be handled?",
            font=ctk.CTkFont(size=13), wraplength=280,
        ).grid(row=0, column=0, padx=24, pady=(20, 8), sticky="ew")

        ctk.CTkButton(
            self, text="Merge – keep existing transactions",
            command=lambda: self._choose("merge"),
        ).grid(row=1, column=0, padx=24, pady=4, sticky="ew")

        ctk.CTkButton(
            self, text="Replace – wipe and restore",
            fg_color="#F44336", hover_color="#D32F2F",
            command=lambda: self._choose("replace"),
        ).grid(row=2, column=0, padx=24, pady=(4, 8), sticky="ew")

        ctk.CTkButton(
            self, text="Cancel",
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self.destroy,
        ).grid(row=3, column=0, padx=24, pady=(0, 16), sticky="ew")

        self.transient(master)
        self.grab_set()
        center_over(self, master)

    def _choose(self, mode: str):
        self.mode = mode
        self.destroy()
