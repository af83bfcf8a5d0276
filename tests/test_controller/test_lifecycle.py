"""Tests for the controller hooks, request access and fluent setters."""
import pytest

from carafe import Controller, ControllerInterface, NoRequestContext, Request, Route
from carafe.config import THEME_LAYOUT_PATH, THEME_NAME


def make_controller(ctx, request=None):
    return Controller(Route("index", "/", Controller), request, context=ctx)


class TestConstruction:
    def test_is_a_controller_interface(self, app):
        with app.test_request_context() as ctx:
            assert isinstance(make_controller(ctx), ControllerInterface)

    def test_route_is_kept(self, app):
        route = Route("index", "/", Controller)
        with app.test_request_context() as ctx:
            controller = Controller(route, context=ctx)
            assert controller.route is route

    def test_route_is_read_only(self, app):
        with app.test_request_context() as ctx:
            controller = make_controller(ctx)
            with pytest.raises(AttributeError):
                controller.route = Route("other", "/other", Controller)

    def test_data_collection_starts_empty(self, app):
        with app.test_request_context() as ctx:
            assert len(make_controller(ctx).get_data()) == 0

    def test_layout_template_defaults_to_main(self, app):
        with app.test_request_context() as ctx:
            assert make_controller(ctx).get_theme_layout_template() == "Main"

    def test_context_defaults_to_active_one(self, app):
        with app.test_request_context() as ctx:
            controller = Controller(Route("index", "/", Controller))
            assert controller.context is ctx
            assert controller.config is ctx.config

    def test_construction_outside_request_context(self):
        controller = Controller(Route("index", "/", Controller))
        assert controller.get_theme_layout_template() == "Main"
        assert len(controller.get_data()) == 0
        with pytest.raises(NoRequestContext):
            controller.config
        with pytest.raises(NoRequestContext):
            controller.get_request()

    def test_context_resolved_on_first_use(self, app):
        controller = Controller(Route("index", "/", Controller))
        with app.test_request_context() as ctx:
            assert controller.config is ctx.config
        assert controller.context is ctx

    def test_default_action_not_implemented(self, app):
        with app.test_request_context() as ctx:
            with pytest.raises(NotImplementedError):
                make_controller(ctx).run()


class TestRunBefore:
    def test_reads_theme_from_config(self, app, layout_path):
        with app.test_request_context() as ctx:
            controller = make_controller(ctx)
            controller.run_before()
            assert controller.theme_name == "Default"
            assert controller.theme_layout_path == str(layout_path)

    def test_rereads_config_on_every_call(self, app):
        with app.test_request_context() as ctx:
            controller = make_controller(ctx)
            controller.run_before()
            ctx.config[THEME_NAME] = "Dark"
            ctx.config[THEME_LAYOUT_PATH] = "/srv/other"
            controller.run_before()
            assert controller.theme_name == "Dark"
            assert controller.theme_layout_path == "/srv/other"

    def test_missing_theme_key_propagates(self, app):
        with app.test_request_context() as ctx:
            del ctx.config[THEME_NAME]
            controller = make_controller(ctx)
            with pytest.raises(KeyError):
                controller.run_before()

    def test_run_after_is_a_no_op(self, app):
        with app.test_request_context() as ctx:
            controller = make_controller(ctx)
            assert controller.run_after() is None
            assert len(controller.get_data()) == 0


class TestGetRequest:
    def test_created_from_ambient_context(self, app):
        with app.test_request_context("/articles?page=2") as ctx:
            controller = make_controller(ctx)
            req = controller.get_request()
            assert isinstance(req, Request)
            assert req.environ is ctx.environ
            assert req.args["page"] == "2"

    def test_created_request_is_cached(self, app):
        with app.test_request_context() as ctx:
            controller = make_controller(ctx)
            assert controller.get_request() is controller.get_request()

    def test_explicit_request_is_returned(self, app):
        with app.test_request_context() as ctx:
            controller = make_controller(ctx, request=ctx.request)
            assert controller.get_request() is ctx.request

    def test_no_ambient_context(self, app):
        with app.test_request_context() as ctx:
            controller = make_controller(ctx)
        with pytest.raises(NoRequestContext):
            controller.get_request()


class TestAccessors:
    def test_module_path(self, app):
        with app.test_request_context() as ctx:
            controller = make_controller(ctx)
            assert controller.get_module_path() == ""
            assert controller.set_module_path("/srv/modules/blog") is controller
            assert controller.get_module_path() == "/srv/modules/blog"

    def test_theme_layout_template(self, app):
        with app.test_request_context() as ctx:
            controller = make_controller(ctx)
            assert controller.set_theme_layout_template("Bare") is controller
            assert controller.get_theme_layout_template() == "Bare"

    def test_setters_chain(self, app):
        with app.test_request_context() as ctx:
            controller = make_controller(ctx)
            (controller
                .set_module_path("/m")
                .set_theme_layout_template("Bare")
                .add_data("a", 1)
                .set_metas("Page"))
            assert controller.get_module_path() == "/m"
            assert controller.get_data()["a"] == 1
