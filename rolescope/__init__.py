"""RoleScope package.

Turns the free-form text a generative model returns for a job posting into one
validated record:
- `normalize.py` strips fences, slices out one object and parses it leniently.
- `reconcile.py` maps the model's alternate key spellings onto the canonical schema.
- `models.py` defines that schema (what the dataset owns).
- `pipeline.py` wires the stages together and serializes the JSON-Lines output.
"""
