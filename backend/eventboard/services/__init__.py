"""Domain services for agendas, imports, cascades and registrations."""
