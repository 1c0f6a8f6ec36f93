"""
Type Editor Backend — API Routes Package
=========================================

What:  HTTP route handlers that accept requests and return responses.
How:   Each route module handles one resource; handlers stay thin and
       delegate to the services package.

Route Inventory:
    - documents.py: GET/POST       /api/documents
                    GET/PUT/DELETE /api/documents/{id}
                    GET            /api/documents/{id}/nodes
    - nodes.py:     POST           /api/nodes
                    GET/PUT/DELETE /api/nodes/{id}
                    GET            /api/nodes/{id}/children
                    POST           /api/nodes/document/{document_id}/reorder
    - content.py:   GET/PUT/DELETE /api/content/{node_id}
                    GET            /api/content/document/{document_id}
    - upload.py:    POST           /api/upload
                    GET            /api/upload/list
                    DELETE         /api/upload/{filename}
                    GET            /uploads/{path}
    - export.py:    POST           /api/export/pdf
    - health.py:    GET            /health, /health/detailed
"""
