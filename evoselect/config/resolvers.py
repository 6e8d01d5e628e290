import hydra
from omegaconf import OmegaConf


def register_resolvers() -> None:
    """Register the OmegaConf resolvers used by selection configs.

    ``${get_object:pkg.module.fun}`` imports a fitness function by dotted path;
    ``${len:${names}}`` sizes a count from a list elsewhere in the config.
    """
    resolvers = {
        "get_object": lambda obj: hydra.utils.get_object(obj),
        "len": lambda arr: len(arr),
    }
    for name, resolver in resolvers.items():
        if not OmegaConf.has_resolver(name):
            OmegaConf.register_new_resolver(name, resolver)
