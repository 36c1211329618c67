"""
The VIEW layer contains the PySide6 widgets. It reads the controller's state
to paint and forwards user input to the controller.
"""
