from importlib import import_module

modules = [
    'events',
    'agenda',
    'directory',
    'imports',
    'forms',
    'submissions',
    'files',
    'public',
    'legacy',
]

for m in modules:
    import_module(f'.{m}', __name__)

__all__ = modules
