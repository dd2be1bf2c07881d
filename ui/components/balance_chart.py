import customtkinter as ctk
from decimal import Decimal
from matplotlib.figure import Figure
from matplotlib.backends.backend_tkagg import FigureCanvasTkAgg

from models.ledger import DayCell
from utils.constants import EXPENSE_COLOR, INCOME_COLOR, TODAY_COLOR


class BalanceChart(ctk.CTkFrame):
    """Line chart of the running balance across the displayed month."""

    def __init__(self, master, **kwargs):
        super().__init__(master, fg_color=("gray90", "gray20"), corner_radius=8, **kwargs)
        self.grid_columnconfigure(0, weight=1)

        self._fig = Figure(figsize=(8, 1.8), dpi=80, tight_layout=True)
        self._ax = self._fig.add_subplot(111)
        self._canvas = FigureCanvasTkAgg(self._fig, master=self)
        self._canvas.get_tk_widget().grid(row=0, column=0, sticky="ew", padx=8, pady=8)

    def _style_ax(self):
        is_dark = ctk.get_appearance_mode() == "Dark"
        bg = "#2b2b2b" if is_dark else "#e4e4e4"
        fg = "#aaaaaa" if is_dark else "#444444"
        self._fig.patch.set_facecolor(bg)
        self._ax.set_facecolor(bg)
        self._ax.tick_params(colors=fg, labelsize=8)
        for spine in self._ax.spines.values():
            spine.set_edgecolor(fg)

    def plot(self, cells: list[DayCell], starting_balance: Decimal):
        ax = self._ax
        ax.clear()
        self._style_ax()

        if not cells:
            ax.text(0.5, 0.5, "No data", ha="center", va="center",
                    transform=ax.transAxes, color="gray")
            self._canvas.draw_idle()
            return

        days = [c.date.day for c in cells]
        balances = [float(c.balance) for c in cells]
        ax.step(days, balances, where="post", color=TODAY_COLOR, linewidth=1.5)
        ax.fill_between(days, balances, 0, step="post", alpha=0.15,
                        color=INCOME_COLOR if balances[-1] >= 0 else EXPENSE_COLOR)
        ax.axhline(float(starting_balance), color="gray", linestyle=":", linewidth=1)
        if min(balances) < 0:
            ax.axhline(0, color=EXPENSE_COLOR, linestyle="--", linewidth=1)
        ax.set_xlim(days[0], days[-1])
        ax.yaxis.set_major_formatter(
            lambda v, _: f"{v/1000:.1f}k" if abs(v) >= 1000 else f"{v:.0f}"
        )
        self._canvas.draw_idle()
