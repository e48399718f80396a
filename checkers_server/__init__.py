"""Server-authoritative two-player checkers over WebSockets."""
