"""Command line interface (``python -m wbcompare.cli``)."""
