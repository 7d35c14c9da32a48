from rconf.core import Component


class StoreComponent(Component):
    def __init__(self, **kwargs):
        super().__init__(**kwargs)
