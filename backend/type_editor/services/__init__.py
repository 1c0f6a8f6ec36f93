"""
Type Editor Backend — Services Layer
=====================================

What:  Business logic between routes (HTTP) and the database.
How:   Stateless service objects; the request's AsyncSession is passed into
       every call. Each module exposes a singleton instance.

Service Inventory:
    - DocumentService: documents CRUD
    - NodeService:     outline nodes CRUD and per-document listing
    - ContentService:  per-node content fetch and upsert
    - FileService:     upload validation, storage, listing and deletion
"""
