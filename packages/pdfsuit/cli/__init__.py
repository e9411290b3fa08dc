"""Command line interface for :mod:`pdfsuit`."""
