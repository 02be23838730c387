"""
flightgrid - resource-timeline scheduling engine for flight-school day views.
"""

__version__ = "0.1.0"
