from . import assignment  # noqa
