import unittest
from unittest.mock import Mock, patch

from hamcrest import assert_that, calling, instance_of, is_, raises

from x32link import api
from x32link.casparcg.amcp import AmcpClient
from x32link.config.settings import Settings
from x32link.listener import ListenerController, ListenerError
from x32link.support.events import EventSource


class ApiTest(unittest.TestCase):

    def setUp(self):
        self.controller = Mock(spec=ListenerController)
        self.controller.events = EventSource()
        patcher = patch('x32link.api._controller', self.controller)
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_controller_is_shared(self):
        assert_that(api.controller(), is_(self.controller))

    def test_start_listener(self):
        api.start_listener('console', 10023, [1, 2], 0.5)
        self.controller.start.assert_called_once_with('console', 10023, [1, 2], 0.5)

    def test_start_listener_errors_propagate(self):
        self.controller.start.side_effect = ListenerError("Console host is required")
        assert_that(calling(api.start_listener).with_args('', 10023), raises(ListenerError, 'host is required'))

    def test_stop_listener(self):
        api.stop_listener()
        self.controller.stop.assert_called_once_with()

    def test_add_and_remove_listener(self):
        handler = Mock()
        api.add_listener(handler)
        self.controller.events.fire('snapshot')
        api.remove_listener(handler)
        self.controller.events.fire('another')
        handler.assert_called_once_with('snapshot')

    def test_start_from_config_when_enabled(self):
        settings = Settings()
        settings.listener.enabled = True
        settings.listener.host = '10.0.0.5'
        settings.listener.channels = [7]
        assert_that(api.start_from_config(settings), is_(True))
        self.controller.start.assert_called_once_with('10.0.0.5', 10023, [7], 0.0001)

    def test_start_from_config_when_disabled_stops(self):
        assert_that(api.start_from_config(Settings()), is_(False))
        self.controller.start.assert_not_called()
        self.controller.stop.assert_called_once_with()

    @patch('x32link.api.load_settings', return_value=Settings())
    def test_start_from_config_loads_settings(self, load_settings):
        api.start_from_config()
        load_settings.assert_called_once_with()

    def test_amcp_client(self):
        settings = Settings()
        settings.amcp.host = 'playout'
        sut = api.amcp_client(settings)
        assert_that(sut, is_(instance_of(AmcpClient)))
        assert_that(sut.host, is_('playout'))


class DefaultControllerTest(unittest.TestCase):

    def test_default_controller_is_idle(self):
        assert_that(api.controller(), is_(instance_of(ListenerController)))
        api.stop_listener()
        assert_that(api.controller().running, is_(False))
