"""
The VIEW layer: Qt widgets that paint the controller state and forward
pointer/keyboard events to it.
"""
