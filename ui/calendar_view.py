from datetime import date
from decimal import Decimal
from typing import Callable

import customtkinter as ctk

from models.ledger import DayCell
from models.transaction import Transaction
from utils.constants import DAYS_OF_WEEK, EXPENSE_COLOR, INCOME_COLOR, TODAY_COLOR
from utils.currency import format_currency, format_magnitude
from utils.date_helpers import month_grid, today

MAX_CHIPS = 3
CELL_HEIGHT = 104

_CHIP_COLORS = {
    True:  (("#FDECEA", "#4A2323"), EXPENSE_COLOR),   # expense
    False: (("#E8F5E9", "#1F3D23"), INCOME_COLOR),    # income
}


class CalendarView(ctk.CTkFrame):
    """Sunday-first month grid. Each day shows its running balance and the
    transactions occurring on it; clicks are reported through callbacks."""

    def __init__(
        self,
        master,
        on_add: Callable[[date], None],
        on_edit: Callable[[Transaction], None],
        on_delete: Callable[[Transaction], None],
        currency_symbol: str = "$",
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._on_add = on_add
        self._on_edit = on_edit
        self._on_delete = on_delete
        self._symbol = currency_symbol

        for col in range(7):
            self.grid_columnconfigure(col, weight=1, uniform="day")
            ctk.CTkLabel(
                self, text=DAYS_OF_WEEK[col], text_color="gray50",
                font=ctk.CTkFont(weight="bold"),
            ).grid(row=0, column=col, pady=(0, 4))

        self._cells: list[ctk.CTkFrame] = []

    def set_currency_symbol(self, symbol: str):
        self._symbol = symbol

    def render(self, year: int, month: int, days: list[DayCell], starting_balance: Decimal):
        for w in self._cells:
            w.destroy()
        self._cells = []
        for row in range(1, 7):
            self.grid_rowconfigure(row, weight=0, uniform="")

        by_day = {c.date.day: c for c in days}
        current = today()
        for index, day in enumerate(month_grid(year, month)):
            row, col = divmod(index, 7)
            self.grid_rowconfigure(row + 1, weight=1, uniform="week")
            if day is None:
                cell = ctk.CTkFrame(
                    self, height=CELL_HEIGHT, corner_radius=6,
                    fg_color=("gray92", "gray16"),
                )
            else:
                cell = self._build_day(by_day[day], starting_balance, by_day[day].date == current)
            cell.grid(row=row + 1, column=col, padx=2, pady=2, sticky="nsew")
            self._cells.append(cell)

    def _build_day(self, cell: DayCell, starting_balance: Decimal, is_today: bool) -> ctk.CTkFrame:
        frame = ctk.CTkFrame(
            self, height=CELL_HEIGHT, corner_radius=6,
            border_width=2 if is_today else 1,
            border_color=TODAY_COLOR if is_today else ("gray75", "gray30"),
        )
        frame.grid_propagate(False)
        frame.grid_columnconfigure(1, weight=1)
        frame.bind("<Button-1>", lambda e, d=cell.date: self._on_add(d))

        ctk.CTkLabel(
            frame, text=str(cell.date.day),
            text_color=TODAY_COLOR if is_today else ("gray10", "gray90"),
            font=ctk.CTkFont(size=12, weight="bold"), height=18,
        ).grid(row=0, column=0, padx=(6, 2), pady=(3, 0), sticky="w")

        if cell.balance != starting_balance:
            ctk.CTkLabel(
                frame, text=format_currency(cell.balance, self._symbol),
                text_color=INCOME_COLOR if cell.balance >= 0 else EXPENSE_COLOR,
                font=ctk.CTkFont(size=10, weight="bold"), height=18,
            ).grid(row=0, column=1, pady=(3, 0), sticky="e")

        ctk.CTkButton(
            frame, text="+", width=18, height=18,
            fg_color="transparent", text_color="gray50",
            hover_color=("gray85", "gray25"),
            command=lambda d=cell.date: self._on_add(d),
        ).grid(row=0, column=2, padx=(2, 4), pady=(3, 0))

        for i, tx in enumerate(cell.transactions[:MAX_CHIPS]):
            self._build_chip(frame, tx).grid(
                row=i + 1, column=0, columnspan=3, padx=4, pady=1, sticky="ew"
            )
        hidden = len(cell.transactions) - MAX_CHIPS
        if hidden > 0:
            more = ctk.CTkLabel(
                frame, text=f"+{hidden} more", text_color="gray50",
                font=ctk.CTkFont(size=10), height=14,
            )
            more.grid(row=MAX_CHIPS + 1, column=0, columnspan=3, padx=6, sticky="w")
        return frame

    def _build_chip(self, parent, tx: Transaction) -> ctk.CTkFrame:
        bg, fg = _CHIP_COLORS[tx.is_expense]
        chip = ctk.CTkFrame(parent, fg_color=bg, corner_radius=4, height=18)
        chip.grid_columnconfigure(0, weight=1)

        label = f"{tx.description} {format_magnitude(tx.amount, self._symbol)}"
        if tx.is_recurring:
            label += " ↻"
        text = ctk.CTkLabel(
            chip, text=label, text_color=fg, anchor="w",
            font=ctk.CTkFont(size=10), height=16,
        )
        text.grid(row=0, column=0, padx=(4, 0), sticky="ew")
        text.bind("<Button-1>", lambda e, t=tx: self._on_edit(t))
        chip.bind("<Button-1>", lambda e, t=tx: self._on_edit(t))

        ctk.CTkButton(
            chip, text="×", width=14, height=14,
            fg_color="transparent", text_color="gray50",
            hover_color=("gray80", "gray30"),
            command=lambda t=tx: self._on_delete(t),
        ).grid(row=0, column=1, padx=(0, 2))
        return chip
