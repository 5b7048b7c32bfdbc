"""Document-store adapters.

Implementations of the storage protocols for real backends (require
optional dependencies):

    from storecall.adapters.firestore import FirestoreStore  # pip install storecall[firestore]
"""
