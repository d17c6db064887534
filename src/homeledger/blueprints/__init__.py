"""HTTP blueprints for the ``/api`` surface."""
