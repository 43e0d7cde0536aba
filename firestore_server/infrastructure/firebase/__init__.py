"""Firestore REST integration: request/response shaping and client facade."""

from firestore_server.infrastructure.firebase._rest_encoding import (
    decode_document,
    decode_fields,
    encode_document,
    parse_list_documents_response,
    parse_run_query_response,
    run_query_body,
    update_mask_params,
)
from firestore_server.infrastructure.firebase.client import (
    FirestoreClient,
    get_firestore_client,
    init_firestore,
    reset_firestore,
)

__all__ = [
    "FirestoreClient",
    "decode_document",
    "decode_fields",
    "encode_document",
    "get_firestore_client",
    "init_firestore",
    "parse_list_documents_response",
    "parse_run_query_response",
    "reset_firestore",
    "run_query_body",
    "update_mask_params",
]
