"""books/ -- Book catalogue persistence.

Layer rule: no imports from api/ or auth/.
"""
