"""Use cases — orchestration behind the two entry points."""
