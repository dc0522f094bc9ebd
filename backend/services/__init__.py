"""
Services package - Business logic layer.

This package contains all business logic services that operate on Django models
but are decoupled from the HTTP/WebSocket layer. Views call into these and let
the typed errors in services.exceptions propagate.

Modules:
    - order_management: order lifecycle and state transitions
    - matching: region matching and the atomic claim
    - geocoding: map links to coordinates
    - pricing: distance and fare estimation
    - ledger: ticket balances and transactions
    - proofs: proof image storage
    - reporting: disputes filed on orders
"""
