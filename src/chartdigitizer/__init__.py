"""Chart digitizer: place markers on a scanned chart and read off calibrated coordinates."""
