"""Excel workbook loading and writing."""
