"""Host-side driver for ETX OTA firmware and custom-data transactions."""

__version__ = "0.1.0"
