"""Infrastructure layer: Firestore REST request/response shaping and client facade."""
