"""CSV and PDF renderings of a watchlist."""

import csv
import io
from typing import List

from fpdf import FPDF

from reelscout.models.watchlist import WatchlistItem, WatchlistStats

CSV_HEADER = ["ID", "Type", "Title", "Poster Path", "Added At", "Watched", "Rating"]

# (label, width in mm)
PDF_COLUMNS = [("Type", 15), ("Title", 60), ("Added", 25), ("Status", 20), ("Rating", 15)]
PDF_PAGE_BREAK_Y = 270
MAX_TITLE_LENGTH = 35


def watchlist_to_csv(items: List[WatchlistItem]) -> bytes:
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(CSV_HEADER)
    for item in items:
        writer.writerow(
            [
                item.id,
                item.media_type.value,
                item.title,
                item.poster_path,
                item.added_at.strftime("%Y-%m-%d %H:%M:%S"),
                str(item.watched).lower(),
                f"{item.rating:.1f}",
            ]
        )
    return buffer.getvalue().encode("utf-8")


def _latin1(text: str) -> str:
    # The core PDF fonts only cover Latin-1
    return text.encode("latin-1", "replace").decode("latin-1")


def _table_header(pdf: FPDF) -> None:
    pdf.set_font("Helvetica", "B", 9)
    for label, width in PDF_COLUMNS:
        pdf.cell(width, 8, label)
    pdf.ln(8)
    pdf.set_font("Helvetica", "", 8)


def watchlist_to_pdf(items: List[WatchlistItem], stats: WatchlistStats) -> bytes:
    """Render a one-table PDF report with a summary line."""
    pdf = FPDF(orientation="P", unit="mm", format="A4")
    pdf.add_page()

    pdf.set_font("Helvetica", "B", 16)
    pdf.cell(0, 10, "My Watchlist")
    pdf.ln(15)

    pdf.set_font("Helvetica", "", 10)
    pdf.cell(
        0,
        6,
        f"Total Items: {stats.total_items} | Movies: {stats.movies} | "
        f"TV Shows: {stats.tv_shows} | Watched: {stats.watched_items} | "
        f"To Watch: {stats.unwatched_items}",
    )
    pdf.ln(10)

    _table_header(pdf)
    for item in items:
        if pdf.get_y() > PDF_PAGE_BREAK_Y:
            pdf.add_page()
            _table_header(pdf)

        title = item.title
        if len(title) > MAX_TITLE_LENGTH:
            title = title[: MAX_TITLE_LENGTH - 3] + "..."
        row = [
            item.media_type.value,
            title,
            item.added_at.strftime("%Y-%m-%d"),
            "Watched" if item.watched else "To Watch",
            f"{item.rating:.1f}" if item.rating > 0 else "-",
        ]
        for value, (_, width) in zip(row, PDF_COLUMNS):
            pdf.cell(width, 6, _latin1(value))
        pdf.ln(6)

    return bytes(pdf.output())
