"""floodrisk: flood zone, shelter and parcel value queries over in-memory GIS layers."""

__version__ = "0.1.0"
