"""core/ -- Configuration and the error taxonomy. Imports nothing from the other packages."""
