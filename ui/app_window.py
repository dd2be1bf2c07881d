from datetime import date
import customtkinter as ctk

from database.db_manager import DatabaseManager
from models.transaction import Transaction
from services.data_service import DataService
from services.ledger_queries import month_view
from services.ledger_service import LedgerService
from ui.calendar_view import CalendarView
from ui.components.balance_chart import BalanceChart
from ui.components.confirm_dialog import ConfirmDialog
from ui.components.settings_dialog import SettingsDialog
from ui.components.transaction_form import TransactionForm
from utils.constants import APP_NAME, APP_WIDTH, APP_HEIGHT, TODAY_COLOR
from utils.date_helpers import friendly_month, next_month, prev_month, today
from utils.logging_setup import get_logger

logger = get_logger(__name__)


class AppWindow(ctk.CTk):
    def __init__(
        self,
        ledger_service: LedgerService,
        data_service: DataService,
        db: DatabaseManager,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self._svc = ledger_service
        self._data_svc = data_service
        self._db = db

        current = today()
        self._year, self._month = current.year, current.month
        self._starting_balance = self._svc.get_starting_balance()
        self._load_display_settings()

        self.title(APP_NAME)
        self.minsize(900, 700)
        self.geometry(f"{APP_WIDTH}x{APP_HEIGHT}")

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(2, weight=1)

        self._build_header()
        self._build_nav()
        self._calendar = CalendarView(
            self,
            on_add=self._open_add,
            on_edit=self._open_edit,
            on_delete=self._confirm_delete,
            currency_symbol=self._currency_symbol,
        )
        self._calendar.grid(row=2, column=0, sticky="nsew", padx=12)
        self._chart = BalanceChart(self)
        self._chart.grid(row=3, column=0, sticky="ew", padx=12, pady=(8, 12))

        self.refresh()

    def _load_display_settings(self):
        self._currency_symbol = self._db.get_setting("currency_symbol", "$")
        self._date_format = self._db.get_setting("date_format", "MM/DD/YYYY")

    # ── Header ──────────────────────────────────────────────────────────────
    def _build_header(self):
        bar = ctk.CTkFrame(self, fg_color=("gray85", "gray15"), corner_radius=0, height=52)
        bar.grid(row=0, column=0, sticky="ew")

        ctk.CTkLabel(
            bar, text=f"📅  {APP_NAME}",
            font=ctk.CTkFont(size=20, weight="bold"),
        ).pack(side="left", padx=(16, 8), pady=10)

        ctk.CTkButton(
            bar, text="Settings", width=90,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self._open_settings,
        ).pack(side="right", padx=(4, 16))

        ctk.CTkButton(
            bar, text="+ Add Transaction", width=140,
            command=lambda: self._open_add(None),
        ).pack(side="right", padx=4)

        self._balance_var = ctk.StringVar(value=str(self._starting_balance))
        self._balance_entry = ctk.CTkEntry(bar, textvariable=self._balance_var, width=110)
        self._balance_entry.pack(side="right", padx=(4, 12))
        self._balance_entry.bind("<Return>", self._on_starting_balance_commit)
        self._balance_entry.bind("<FocusOut>", self._on_starting_balance_commit)
        ctk.CTkLabel(bar, text="Starting Balance:").pack(side="right")

    def _on_starting_balance_commit(self, _event=None):
        raw = self._balance_var.get().strip() or "0"
        try:
            amount = self._svc.set_starting_balance(raw)
        except ValueError:
            self._balance_entry.configure(border_color="#F44336")
            return
        self._balance_entry.configure(border_color=("gray65", "gray35"))
        if amount != self._starting_balance:
            self._starting_balance = amount
            self.refresh()

    # ── Month navigation ────────────────────────────────────────────────────
    def _build_nav(self):
        nav = ctk.CTkFrame(self, fg_color="transparent")
        nav.grid(row=1, column=0, sticky="ew", padx=12, pady=8)
        nav.grid_columnconfigure(1, weight=1)

        ctk.CTkButton(nav, text="◀", width=36, command=self._prev_month).grid(row=0, column=0)

        center = ctk.CTkFrame(nav, fg_color="transparent")
        center.grid(row=0, column=1)
        self._month_label = ctk.CTkLabel(center, text="", font=ctk.CTkFont(size=17, weight="bold"))
        self._month_label.pack(side="left")
        ctk.CTkButton(
            center, text="↻", width=28,
            fg_color="transparent", text_color=TODAY_COLOR,
            hover_color=("gray85", "gray25"),
            command=self._reset_to_current_month,
        ).pack(side="left", padx=(6, 0))

        ctk.CTkButton(nav, text="▶", width=36, command=self._next_month).grid(row=0, column=2)

    def _prev_month(self):
        self._year, self._month = prev_month(self._year, self._month)
        self.refresh()

    def _next_month(self):
        self._year, self._month = next_month(self._year, self._month)
        self.refresh()

    def _reset_to_current_month(self):
        current = today()
        self._year, self._month = current.year, current.month
        self.refresh()

    # ── Refresh ──────────────────────────────────────────────────────────────
    def refresh(self):
        ledger = self._svc.snapshot()
        self._starting_balance = ledger.starting_balance
        days = month_view(ledger, self._year, self._month)
        self._month_label.configure(text=friendly_month(self._year, self._month))
        self._calendar.render(self._year, self._month, days, ledger.starting_balance)
        self._chart.plot(days, ledger.starting_balance)
        logger.debug("Rendered %04d-%02d with %d transactions",
                     self._year, self._month, len(ledger.transactions))

    def _on_settings_changed(self):
        self._load_display_settings()
        self._calendar.set_currency_symbol(self._currency_symbol)
        self._balance_var.set(str(self._svc.get_starting_balance()))
        self.refresh()

    # ── Dialogs ──────────────────────────────────────────────────────────────
    def _open_add(self, day: date | None):
        form = TransactionForm(
            self, self._svc, initial_date=day, date_format=self._date_format,
        )
        self.wait_window(form)
        if form.saved:
            self.refresh()

    def _open_edit(self, tx: Transaction):
        form = TransactionForm(
            self, self._svc, transaction=tx, date_format=self._date_format,
        )
        self.wait_window(form)
        if form.saved or form.deleted:
            self.refresh()

    def _confirm_delete(self, tx: Transaction):
        dlg = ConfirmDialog(self, "Delete Transaction", f"Delete \"{tx.description}\"?")
        if dlg.result:
            self._svc.delete(tx.id)
            self.refresh()

    def _open_settings(self):
        dlg = SettingsDialog(
            self, db=self._db, data_service=self._data_svc,
            notify_refresh=self._on_settings_changed,
        )
        self.wait_window(dlg)
