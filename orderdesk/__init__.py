"""OrderDesk: order quotation, GST split and fulfilment engine."""

__version__ = "1.0.0"
