import pandas as pd


class ResultTable:
    """Tabular value shared by listings, process results and errors.

    Rows are addressed 1-based. Cells are stored in an object-dtype DataFrame
    so they come back as the exact Python values that went in.
    """

    def __init__(self, header=None, rows=None):
        header = [str(h) for h in (header or [])]
        if len(set(header)) != len(header):
            raise ValueError(f"duplicate column names in header: {header}")
        rows = [list(r) for r in (rows or [])]
        for idx, row in enumerate(rows, start=1):
            if len(row) != len(header):
                raise ValueError(
                    f"row {idx} has {len(row)} cells, header has {len(header)}"
                )
        self._df = pd.DataFrame(rows, columns=header, dtype=object)
        self._df.index = range(1, len(rows) + 1)

    # ---------- constructors ----------
    @classmethod
    def from_records(cls, header, rows):
        return cls(header, rows)

    @classmethod
    def empty(cls):
        return cls([], [])

    @classmethod
    def error(cls, message):
        return cls(["error"], [[str(message)]])

    # ---------- shape ----------
    @property
    def header(self):
        return list(self._df.columns)

    @property
    def rows(self):
        return [list(r) for r in self._df.itertuples(index=False, name=None)]

    def __len__(self):
        return len(self._df)

    def is_empty(self):
        return len(self._df.columns) == 0 and len(self._df) == 0

    def __eq__(self, other):
        if not isinstance(other, ResultTable):
            return NotImplemented
        return self.header == other.header and self.rows == other.rows

    def __repr__(self):
        return f"ResultTable(header={self.header!r}, rows={self.rows!r})"

    # ---------- accessors ----------
    def by_row(self, index: int):
        """Row ``index`` (1-based) as a one-row table, or the bare cell when
        the table has a single column. Out of range gives an empty table."""
        if index < 1 or index > len(self._df):
            return ResultTable.empty()
        row = list(self._df.loc[index])
        if len(self._df.columns) == 1:
            return row[0]
        return ResultTable(self.header, [row])

    def by_column(self, name: str):
        if name not in self._df.columns:
            return ResultTable.empty()
        return self._df[name].copy()

    def to_frame(self):
        return self._df.copy()

    # ---------- rendering ----------
    def render_lines(self):
        if not self.header:
            return []
        header = self.header
        body = [["" if v is None else str(v) for v in row] for row in self.rows]
        widths = [len(h) for h in header]
        for row in body:
            for i, cell in enumerate(row):
                widest = max((len(part) for part in cell.split("\n")), default=0)
                widths[i] = max(widths[i], widest)

        def _fmt(cells):
            return "  ".join(c.ljust(widths[i]) for i, c in enumerate(cells)).rstrip()

        lines = [_fmt(header)]
        for row in body:
            # multi-line cells continue in their own column on following lines
            split = [cell.split("\n") for cell in row]
            height = max((len(parts) for parts in split), default=1)
            for k in range(height):
                lines.append(_fmt([parts[k] if k < len(parts) else "" for parts in split]))
        return lines

    def to_text(self):
        return "\n".join(self.render_lines())
