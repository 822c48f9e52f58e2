"""
Export logic for matrices and linear systems.
Handles tabular rendering with pandas and Excel reports through xlsxwriter.
"""
import io
import re
import logging
from typing import Any, Dict, List, Optional

import pandas as pd
import xlsxwriter
from xlsxwriter.exceptions import DuplicateWorksheetName

from labmath.config import LinearSystem
from labmath.linalg import InfiniteSolutionsError, invert
from labmath.matrix import Matrix

logger = logging.getLogger(__name__)

AUGMENTED_MARKER = "|"


def matrix_to_dataframe(matrix: Matrix) -> pd.DataFrame:
    """Return the cells of ``matrix`` as a DataFrame (lines ``l0..``, columns ``c0..``).

    The first column of an augmented block is prefixed with ``|``.
    """
    columns = []
    for j in range(matrix.columns):
        name = f"c{j}"
        if j == matrix.augmented_column:
            name = AUGMENTED_MARKER + name
        columns.append(name)
    index = [f"l{i}" for i in range(matrix.lines)]
    return pd.DataFrame(matrix.to_rows(), index=index, columns=columns)


def solution_to_dataframe(solution: Optional[Dict[str, Any]]) -> pd.DataFrame:
    if not solution:
        return pd.DataFrame(columns=["Variable", "Value"])
    return pd.DataFrame(
        [{"Variable": name, "Value": value} for name, value in solution.items()]
    )


def _cell_value(value: Any) -> Any:
    # xlsxwriter only knows builtin numbers; decimals and fractions go through float
    if isinstance(value, (int, float)):
        return value
    if hasattr(value, "item"):
        return value.item()
    try:
        return float(value)
    except (TypeError, ValueError):
        return str(value)


class MatrixExcelExporter:
    def __init__(self):
        self.output = io.BytesIO()
        self.workbook = xlsxwriter.Workbook(self.output, {'in_memory': True})

        self.fmt_header = self.workbook.add_format({
            'bold': True, 'bg_color': '#D9E1F2', 'border': 1,
            'align': 'center', 'valign': 'vcenter'
        })
        self.fmt_header_main = self.workbook.add_format({
            'bold': True, 'font_size': 12, 'bg_color': '#4472C4',
            'font_color': 'white', 'border': 1
        })
        self.fmt_num = self.workbook.add_format({'num_format': '0.000###', 'border': 1})
        # Left border marks the start of the augmented block
        self.fmt_num_boundary = self.workbook.add_format({'num_format': '0.000###', 'border': 1, 'left': 5})
        self.fmt_text = self.workbook.add_format({'border': 1, 'align': 'left'})

    def close(self):
        self.workbook.close()
        self.output.seek(0)
        return self.output

    def _write_table(self, worksheet, start_row: int, title: str, df: pd.DataFrame, boundary: Optional[int] = None) -> int:
        """Helper to write a DataFrame under a title row; returns the next free row."""
        if df.empty:
            return start_row

        worksheet.merge_range(start_row, 0, start_row, max(len(df.columns), 1), title, self.fmt_header_main)
        row = start_row + 1

        worksheet.write(row, 0, "", self.fmt_header)
        for col_num, value in enumerate(df.columns):
            worksheet.write(row, col_num + 1, str(value), self.fmt_header)
        row += 1

        for label, record in df.iterrows():
            worksheet.write(row, 0, str(label), self.fmt_header)
            for col_num, val in enumerate(record.tolist()):
                cell_fmt = self.fmt_num_boundary if col_num == boundary else self.fmt_num
                value = _cell_value(val)
                if isinstance(value, str):
                    cell_fmt = self.fmt_text
                worksheet.write(row, col_num + 1, value, cell_fmt)
            row += 1

        return row + 1

    def _sheet(self, name: str):
        safe_name = re.sub(r"[\[\]:*?/\\]", "-", str(name).strip())[:31] or None
        try:
            return self.workbook.add_worksheet(safe_name)
        except DuplicateWorksheetName:
            logger.debug("Worksheet %r already exists, using a generated name", safe_name)
            return self.workbook.add_worksheet()

    def export_matrix(self, matrix: Matrix, title: str = "Matrix") -> None:
        ws = self._sheet(title)
        ws.set_column(0, 0, 8)
        ws.write(0, 0, title, self.fmt_header_main)
        ws.write(1, 0, f"{matrix.lines}x{matrix.columns} of {matrix.scalar_type.value}")
        self._write_table(ws, 3, "Values", matrix_to_dataframe(matrix), matrix.augmented_column)

    def export_system(self, system: LinearSystem) -> None:
        title = system.label or "System"
        ws = self._sheet(title)
        ws.set_column(0, 0, 12)
        ws.write(0, 0, f"Linear system: {title}", self.fmt_header_main)
        ws.write(1, 0, f"Desc: {system.description}")
        ws.write(2, 0, f"Date: {pd.Timestamp.now().strftime('%Y-%m-%d %H:%M')}")

        augmented = system.augmented()
        curr_row = self._write_table(ws, 4, "Augmented matrix", matrix_to_dataframe(augmented), augmented.augmented_column)

        if system.coefficients.is_square:
            inverse = invert(system.coefficients.cast("float64"))
            if inverse is None:
                ws.write(curr_row, 0, "The coefficient matrix is not invertible.", self.fmt_text)
                curr_row += 2
            else:
                curr_row = self._write_table(ws, curr_row, "Inverse", matrix_to_dataframe(inverse))

        try:
            solution = system.solve()
        except InfiniteSolutionsError as exc:
            ws.write(curr_row, 0, str(exc), self.fmt_text)
            return
        if solution is None:
            ws.write(curr_row, 0, "The system has no solution.", self.fmt_text)
            return
        self._write_table(ws, curr_row, "Solution", solution_to_dataframe(solution).set_index("Variable"))

    def export_systems(self, systems: List[LinearSystem]) -> io.BytesIO:
        for system in systems:
            self.export_system(system)
        return self.close()


__all__ = [
    "MatrixExcelExporter",
    "matrix_to_dataframe",
    "solution_to_dataframe",
]
