"""ToDo Cabin backend: team accounts, attendance registry, todos and minute tracker."""
