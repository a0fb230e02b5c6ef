"""auth/ -- Authentication package for the Bookshelf API.

Password hashing, bearer token issuance/verification, the route guard, the
users store and the account service.

Layer rule: auth/ imports only stdlib, third-party libraries and core/.
It does NOT import from api/ or books/.
api/ imports from auth/, not the other way around.
"""
