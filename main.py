import os
import sys
import customtkinter as ctk

# Ensure project root is on sys.path when run directly
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from database.db_manager import DatabaseManager
from database.ledger_store import LedgerStore
from database.transaction_dao import TransactionDAO

from services.data_service import DataService
from services.ledger_service import LedgerService

from ui.app_window import AppWindow
from utils.app_config import get_db_folder, get_log_level
from utils.logging_setup import configure_logging, get_logger


def main():
    # ── Bootstrap: logging and DB folder from pre-DB config ───────────────────
    configure_logging(get_log_level())
    logger = get_logger("main")
    db_folder = get_db_folder()

    # ── Database ─────────────────────────────────────────────────────────────
    db = DatabaseManager.open(db_folder=db_folder)

    # ── Store & services ─────────────────────────────────────────────────────
    store = LedgerStore(db, TransactionDAO(db))
    ledger_svc = LedgerService(store)
    data_svc = DataService(store)

    # ── Appearance ───────────────────────────────────────────────────────────
    ctk.set_appearance_mode(db.get_setting("appearance_mode", "system"))
    ctk.set_default_color_theme("blue")

    # ── Launch UI ────────────────────────────────────────────────────────────
    app = AppWindow(ledger_service=ledger_svc, data_service=data_svc, db=db)

    def on_close():
        logger.info("Shutting down")
        db.close()
        app.destroy()

    app.protocol("WM_DELETE_WINDOW", on_close)
    app.mainloop()


if __name__ == "__main__":
    main()
