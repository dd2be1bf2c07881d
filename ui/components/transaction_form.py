import customtkinter as ctk
from datetime import date

from models.transaction import Transaction
from services.ledger_service import LedgerService
from ui.components.confirm_dialog import ConfirmDialog, center_over
from ui.components.date_picker import DatePickerWidget
from utils.constants import RECURRENCES, RECURRENCE_LABELS, RECURRENCE_NONE, EXPENSE_COLOR, INCOME_COLOR
from utils.date_helpers import today


class TransactionForm(ctk.CTkToplevel):
    """Add a transaction, or edit/delete an existing one.

    After the window closes, .saved / .deleted tell the caller what happened.
    """

    def __init__(
        self,
        master,
        ledger_service: LedgerService,
        transaction: Transaction | None = None,
        initial_date: date | None = None,
        date_format: str = "MM/DD/YYYY",
        **kwargs,
    ):
        super().__init__(master, **kwargs)
        self._svc = ledger_service
        self._transaction = transaction
        self._date_format = date_format
        self.saved = False
        self.deleted = False

        self.title("Edit Transaction" if transaction else "Add Transaction")
        self.resizable(False, False)
        self.grid_columnconfigure(1, weight=1)

        self._build_fields(transaction, initial_date or today())
        self._build_footer()

        self.transient(master)
        self.grab_set()
        center_over(self, master)

    def _label(self, text, row):
        ctk.CTkLabel(self, text=text).grid(
            row=row, column=0, padx=(16, 8), pady=4, sticky="e"
        )

    def _build_fields(self, tx: Transaction | None, initial_date: date):
        r = 0

        self._label("Date:", r)
        self._date_picker = DatePickerWidget(
            self,
            initial_date=tx.date if tx else initial_date,
            date_format=self._date_format,
        )
        self._date_picker.grid(row=r, column=1, padx=(0, 16), pady=(16, 4), sticky="w")
        r += 1

        self._label("Description:", r)
        self._desc_var = ctk.StringVar(value=tx.description if tx else "")
        desc_entry = ctk.CTkEntry(self, textvariable=self._desc_var, width=220)
        desc_entry.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
        r += 1

        self._label("Amount:", r)
        self._amount_var = ctk.StringVar(value=f"{tx.magnitude:.2f}" if tx else "")
        ctk.CTkEntry(self, textvariable=self._amount_var, width=220).grid(
            row=r, column=1, padx=(0, 16), pady=4, sticky="ew"
        )
        r += 1

        self._label("Type:", r)
        self._kind_var = ctk.StringVar(value="income" if tx and not tx.is_expense else "expense")
        kind_frame = ctk.CTkFrame(self, fg_color="transparent")
        kind_frame.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        for value, text, color in (("expense", "Expense", EXPENSE_COLOR), ("income", "Income", INCOME_COLOR)):
            ctk.CTkRadioButton(
                kind_frame, text=text, text_color=color,
                variable=self._kind_var, value=value,
            ).pack(side="left", padx=4)
        r += 1

        self._label("Recurring:", r)
        self._labels_to_kind = {RECURRENCE_LABELS[k]: k for k in RECURRENCES}
        current = tx.recurrence if tx else RECURRENCE_NONE
        self._recurrence_var = ctk.StringVar(value=RECURRENCE_LABELS[current])
        ctk.CTkComboBox(
            self, values=[RECURRENCE_LABELS[k] for k in RECURRENCES],
            variable=self._recurrence_var, width=220, state="readonly",
        ).grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
        r += 1

        self._footer_row = r
        desc_entry.focus_set()

    def _build_footer(self):
        r = self._footer_row
        self._error_var = ctk.StringVar()
        ctk.CTkLabel(
            self, textvariable=self._error_var,
            text_color="#F44336", wraplength=280, anchor="w"
        ).grid(row=r, column=0, columnspan=2, padx=16, pady=(0, 4), sticky="ew")
        r += 1

        btn_frame = ctk.CTkFrame(self, fg_color="transparent")
        btn_frame.grid(row=r, column=0, columnspan=2, padx=16, pady=(4, 8), sticky="ew")
        ctk.CTkButton(
            btn_frame, text="Cancel", width=90,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self.destroy,
        ).pack(side="left")
        ctk.CTkButton(
            btn_frame,
            text="Save Changes" if self._transaction else "Add Transaction",
            width=130,
            command=self._on_save,
        ).pack(side="right")
        r += 1

        if self._transaction:
            ctk.CTkButton(
                self, text="Delete Transaction",
                fg_color="transparent", border_width=1, border_color="#F44336",
                text_color="#F44336", hover_color=("gray85", "gray25"),
                command=self._on_delete,
            ).grid(row=r, column=0, columnspan=2, padx=16, pady=(0, 16), sticky="ew")
        else:
            btn_frame.grid_configure(pady=(4, 16))

    def _on_save(self):
        date_ = self._date_picker.get()
        if date_ is None and not self._date_picker.is_empty():
            self._error_var.set("Invalid date.")
            return

        kwargs = dict(
            date_=date_,
            description=self._desc_var.get(),
            amount=self._amount_var.get(),
            is_expense=self._kind_var.get() == "expense",
            recurrence=self._labels_to_kind.get(self._recurrence_var.get(), RECURRENCE_NONE),
        )
        try:
            if self._transaction:
                self._svc.update(self._transaction.id, **kwargs)
            else:
                self._svc.create(**kwargs)
        except ValueError as e:
            self._error_var.set(str(e))
            return
        self.saved = True
        self.destroy()

    def _on_delete(self):
        dlg = ConfirmDialog(
            self, "Delete Transaction",
            f"Delete \"{self._transaction.description}\"?"
            + (" All of its occurrences will be removed." if self._transaction.is_recurring else ""),
        )
        if not dlg.result:
            return
        self._svc.delete(self._transaction.id)
        self.deleted = True
        self.destroy()
