"""
The settings the host application persists for the console link and the playout server.
"""
import os

from x32link.config.config import apply_conf_path, load_config
from x32link.protocol.console import DEFAULT_CHANNELS, DEFAULT_PORT
from x32link.support.mixins import CommonEqualityMixin, StringerMixin

CONFIG_NAME = 'x32link'
CONFIG_DIRECTORY = os.path.dirname(__file__)

DEFAULT_HOST = '192.168.0.100'
DEFAULT_THRESHOLD = 0.0001


class ListenerSettings(CommonEqualityMixin, StringerMixin):
    """
    How to reach the console and which channels drive the on-air indicator.
    show_indicator is not used by the listener; it is kept for the host application, which decides
    whether to display the indicator.
    """

    def __init__(self):
        self.enabled = False
        self.show_indicator = True
        self.host = DEFAULT_HOST
        self.port = DEFAULT_PORT
        self.threshold = DEFAULT_THRESHOLD
        self.channels = list(DEFAULT_CHANNELS)


class AmcpSettings(CommonEqualityMixin, StringerMixin):
    """ where the CasparCG server listens for AMCP commands """

    def __init__(self):
        self.host = '127.0.0.1'
        self.port = 5250
        self.timeout = 1.2


class Settings(CommonEqualityMixin, StringerMixin):

    def __init__(self, listener: ListenerSettings=None, amcp: AmcpSettings=None):
        self.listener = listener or ListenerSettings()
        self.amcp = amcp or AmcpSettings()


def load_settings(name=CONFIG_NAME, directory=CONFIG_DIRECTORY, user_file=None) -> Settings:
    """
    Loads the layered configuration and applies the [listener] and [amcp] sections.
    Values that are not configured keep the defaults above.
    :raises ConfigObjError: if the configuration is malformed or invalid
    """
    conf = load_config(name, directory, user_file)
    settings = Settings()
    apply_conf_path(conf, ['listener'], settings.listener)
    apply_conf_path(conf, ['amcp'], settings.amcp)
    return settings
