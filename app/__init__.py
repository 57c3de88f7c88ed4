"""
Gaminute application package.

Introduces a layered architecture:

  app/repositories/  — pure I/O: the portfolio catalogue, from memory (with an
                       optional JSON override file) or from the database.
  app/services/      — business logic: filtering, sorting, stats, contact
                       validation and email delivery.

``gaminute_server.py`` is the integration point: it creates repository and
service instances at start-up and its Flask route handlers call the services
directly, giving a clean separation between the HTTP layer and the domain.
``gaminute_client.py`` reuses the same filter/sort functions client-side.
"""
