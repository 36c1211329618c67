"""
The CONTROLLER layer holds the layout, geometry and interaction logic and the
`GraphController` that applies it to the view state. It does not import Qt.
"""
