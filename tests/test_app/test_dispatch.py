"""Tests for the lifecycle runner, the dispatcher and full requests."""
import json

import pytest

from carafe import Controller, ControllerError, Dispatcher, Failure, Success, run_lifecycle
from carafe.config import META
from carafe.responses import JsonApiResponse, Response, TextResponse

AJAX = {"X-Requested-With": "XMLHttpRequest"}


class Recorder:
    def __init__(self, fail_in=None):
        self.calls = []
        self.fail_in = fail_in

    def _step(self, name):
        self.calls.append(name)
        if name == self.fail_in:
            raise ValueError(name)

    def run_before(self):
        self._step("run_before")

    def run(self, **params):
        self._step("run")
        return params

    def run_after(self):
        self._step("run_after")


class TestRunLifecycle:
    def test_order(self):
        controller = Recorder()
        result = run_lifecycle(controller, "run", {"slug": "x"})
        assert controller.calls == ["run_before", "run", "run_after"]
        assert result == Success({"slug": "x"})

    @pytest.mark.parametrize("step, calls", [
        ("run_before", ["run_before"]),
        ("run", ["run_before", "run"]),
        ("run_after", ["run_before", "run", "run_after"]),
    ])
    def test_failure_stops_the_lifecycle(self, step, calls):
        controller = Recorder(fail_in=step)
        result = run_lifecycle(controller)
        assert controller.calls == calls
        assert isinstance(result, Failure)
        assert result.step == step
        assert str(result.error) == step

    def test_missing_action_is_a_failure(self):
        result = run_lifecycle(Recorder(), "nope")
        assert isinstance(result, Failure)
        assert isinstance(result.error, AttributeError)


class TestMakeResponse:
    def test_response_is_kept(self):
        response = Response()
        assert Dispatcher().make_response(response) is response

    def test_string_is_html(self):
        response = Dispatcher().make_response("hi")
        assert response.mimetype == "text/html"
        assert response.get_content() == "hi"

    def test_dict_is_json(self):
        response = Dispatcher().make_response({"a": 1})
        assert isinstance(response, JsonApiResponse)

    def test_none_is_no_content(self):
        response = Dispatcher().make_response(None)
        assert isinstance(response, TextResponse)
        assert response.status_code == 204

    def test_unsupported_value(self):
        with pytest.raises(TypeError):
            Dispatcher().make_response(42)


class TestRequests:
    def test_string_action(self, app):
        @app.route("/hello")
        class Hello(Controller):
            def run(self):
                return "hi"

        resp = app.test_client().get("/hello")
        assert resp.status_code == 200
        assert resp.mimetype == "text/html"
        assert resp.get_data(as_text=True) == "hi"

    def test_hooks_run_in_order(self, app):
        order = []

        @app.route("/")
        class Index(Controller):
            def run_before(self):
                super().run_before()
                order.append("before")

            def run(self):
                order.append("action")
                return "ok"

            def run_after(self):
                order.append("after")

        app.test_client().get("/")
        assert order == ["before", "action", "after"]

    def test_url_params_reach_the_action(self, app):
        @app.route("/articles/<int:article_id>", action="show")
        class Articles(Controller):
            def show(self, article_id):
                return {"id": article_id}

        resp = app.test_client().get("/articles/7")
        assert resp.mimetype == "application/json"
        assert resp.get_json() == {"id": 7}

    def test_none_action_gives_no_content(self, app):
        @app.route("/ping")
        class Ping(Controller):
            def run(self):
                pass

        assert app.test_client().get("/ping").status_code == 204

    def test_render_in_theme_layout(self, app, module_path):
        @app.route("/article")
        class Article(Controller):
            def run_before(self):
                super().run_before()
                self.set_module_path(str(module_path))

            def run(self):
                self.set_metas("Cats", "All about cats")
                self.add_data("title", "Cats").add_data("body", "<p>meow</p>")
                return self.render("Show")

        resp = app.test_client().get("/article")
        assert resp.status_code == 200
        assert resp.get_data(as_text=True) == (
            "Default:Cats - Site|All about cats|<h1>Cats</h1>&lt;p&gt;meow&lt;/p&gt;"
        )

    def test_render_with_other_layout_template(self, app, module_path):
        @app.route("/bare")
        class Bare(Controller):
            def run(self):
                self.set_module_path(str(module_path)).set_theme_layout_template("Bare")
                self.add_data("title", "T")
                return self.render("Show")

        resp = app.test_client().get("/bare")
        assert resp.get_data(as_text=True) == "bare|<h1>T</h1>"

    def test_render_json(self, app):
        @app.route("/data")
        class Data(Controller):
            def run(self):
                return self.add_data("b", 2).add_data("a", 1).render_json(status=201)

        resp = app.test_client().get("/data")
        assert resp.status_code == 201
        assert resp.get_json() == {"b": 2, "a": 1}

    def test_sent_response_is_used(self, app):
        @app.route("/sent")
        class Sent(Controller):
            def run(self):
                self.response_factory.create("text").set_content("sent").send()
                return "ignored"

        resp = app.test_client().get("/sent")
        assert resp.get_data(as_text=True) == "sent"

    def test_metas_do_not_leak_between_requests(self, app):
        @app.route("/a")
        class A(Controller):
            def run(self):
                self.set_metas("A")
                return "a"

        @app.route("/b")
        class B(Controller):
            def run(self):
                return self.config[META]["title"]

        client = app.test_client()
        client.get("/a")
        assert client.get("/b").get_data(as_text=True) == "Site"
        assert app.config[META]["title"] == "Site"

    def test_unknown_url(self, app):
        assert app.test_client().get("/nope").status_code == 404

    def test_method_not_allowed(self, app):
        @app.route("/only-post", methods=["post"])
        class OnlyPost(Controller):
            def run(self):
                return "ok"

        client = app.test_client()
        assert client.get("/only-post").status_code == 405
        assert client.post("/only-post").status_code == 200


class TestErrors:
    def test_action_error_renders_error_page(self, app):
        @app.route("/boom")
        class Boom(Controller):
            def run(self):
                raise ControllerError("boom", 42)

        resp = app.test_client().get("/boom")
        assert resp.status_code == 500
        assert resp.mimetype == "text/html"
        assert "Exception[42]: boom" in resp.get_data(as_text=True)

    def test_ajax_error_is_json(self, app):
        @app.route("/boom")
        class Boom(Controller):
            def run(self):
                raise ControllerError("boom", 42)

        resp = app.test_client().get("/boom", headers=AJAX)
        assert resp.status_code == 500
        assert resp.mimetype == "application/json"
        trace = json.loads(resp.get_data(as_text=True))
        assert isinstance(trace, str)
        assert "raise ControllerError" in trace

    def test_run_after_skipped_on_error(self, app):
        called = []

        @app.route("/boom")
        class Boom(Controller):
            def run(self):
                raise ValueError("x")

            def run_after(self):
                called.append(True)

        app.test_client().get("/boom")
        assert called == []

    def test_error_in_run_before(self, app):
        @app.route("/boom")
        class Boom(Controller):
            def run_before(self):
                raise ControllerError("not allowed", 3)

            def run(self):
                return "never"

        resp = app.test_client().get("/boom")
        assert resp.status_code == 500
        assert "Exception[3]: not allowed" in resp.get_data(as_text=True)

    def test_error_page_replaces_sent_response(self, app):
        @app.route("/boom")
        class Boom(Controller):
            def run(self):
                self.response_factory.create("html").set_content("partial").send()
                raise ValueError("late")

        resp = app.test_client().get("/boom")
        assert resp.status_code == 500
        assert "partial" not in resp.get_data(as_text=True)

    def test_missing_view_template(self, app, tmp_path):
        @app.route("/missing")
        class Missing(Controller):
            def run(self):
                return self.set_module_path(str(tmp_path)).render("Nope")

        resp = app.test_client().get("/missing")
        assert resp.status_code == 500
        assert "Exception[0]" in resp.get_data(as_text=True)

    def test_unsupported_return_value(self, app):
        @app.route("/odd")
        class Odd(Controller):
            def run(self):
                return 42

        assert app.test_client().get("/odd").status_code == 500

    def test_broken_error_page_propagates_when_testing(self, app, tmp_path):
        import jinja2

        @app.route("/boom")
        class Boom(Controller):
            def run(self):
                raise ValueError("x")

        app.config["THEME_LAYOUT_PATH"] = str(tmp_path / "nowhere")
        app.testing = True
        with pytest.raises(jinja2.TemplateNotFound):
            app.test_client().get("/boom")

    def test_broken_error_page_plain_500(self, app, tmp_path):
        @app.route("/boom")
        class Boom(Controller):
            def run(self):
                raise ValueError("x")

        app.config["THEME_LAYOUT_PATH"] = str(tmp_path / "nowhere")
        app.config["PROPAGATE_EXCEPTIONS"] = False
        resp = app.test_client().get("/boom")
        assert resp.status_code == 500
        assert resp.mimetype == "text/plain"
        assert resp.get_data(as_text=True) == "Internal Server Error"
