class RetrievalError(ValueError):
    """Raised when station or year data cannot be retrieved from its source."""

    def __init__(self, message: str, *, station_id: str, year: int | None = None):
        """Creates a new RetrievalError instance.

        Args:
            message: the exception message
            station_id: the station whose data was requested
            year: the requested year, or None for station metadata requests
        """
        super().__init__(message)
        self.station_id = station_id
        self.year = year

    def __str__(self) -> str:
        base = super().__str__()
        if self.year is None:
            return f"{base} (station {self.station_id})"
        return f"{base} (station {self.station_id}, year {self.year})"


class EmptyDatasetError(ValueError):
    """Raised when a retrieval succeeds, but yields no usable days."""

    def __init__(self, station_id: str, year: int):
        super().__init__(f"No data for station {station_id} in {year}")
        self.station_id = station_id
        self.year = year
