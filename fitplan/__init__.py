"""Exercise recommendation and workout plan assembly engine."""
