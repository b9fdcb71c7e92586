"""
Interaction Layer
=================
Turns pointer events into point/calibration mutations.

Note: Besides QObject/Signal for change notification, this package does NOT
touch widgets or painting.
"""
