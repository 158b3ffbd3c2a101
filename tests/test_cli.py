from pathlib import Path
from unittest.mock import patch

from click.testing import CliRunner

from postmock.cli import main
from postmock.server.app import create_app

FIXTURES = Path(__file__).parent / "fixtures"


def _config(MockServer):
    return MockServer.call_args.args[0]


class TestCliServe:
    @patch("postmock.cli.uvicorn.Server")
    def test_serve_openapi(self, MockServer):
        runner = CliRunner()
        result = runner.invoke(main, ["serve", str(FIXTURES / "petstore.yaml"), "-p", "5050"])

        assert result.exit_code == 0, result.output
        MockServer.return_value.run.assert_called_once()
        assert _config(MockServer).port == 5050
        assert "GET    /pets" in result.output
        assert "Total endpoints: 4" in result.output

    @patch("postmock.cli.uvicorn.Server")
    def test_serve_options(self, MockServer):
        runner = CliRunner()
        result = runner.invoke(main, [
            "serve", str(FIXTURES / "sample.postman.json"),
            "--delay", "100-200", "--dynamic", "--no-cors", "--host", "0.0.0.0",
        ])

        assert result.exit_code == 0, result.output
        assert "Dynamic responses: Yes" in result.output
        assert "Delay simulation: 100-200ms" in result.output
        assert _config(MockServer).host == "0.0.0.0"

    @patch("postmock.cli.uvicorn.Server")
    def test_port_from_environment(self, MockServer):
        runner = CliRunner()
        result = runner.invoke(main, ["serve", str(FIXTURES / "petstore.yaml")], env={"POSTMOCK_PORT": "6060"})

        assert result.exit_code == 0, result.output
        assert _config(MockServer).port == 6060

    @patch("postmock.cli.uvicorn.Server")
    def test_invalid_delay(self, MockServer):
        runner = CliRunner()
        result = runner.invoke(main, ["serve", str(FIXTURES / "petstore.yaml"), "--delay", "300-100"])

        assert result.exit_code == 2
        assert "Invalid delay range" in result.output
        MockServer.assert_not_called()

    @patch("postmock.cli.uvicorn.Server")
    def test_invalid_port(self, MockServer):
        runner = CliRunner()
        result = runner.invoke(main, ["serve", str(FIXTURES / "petstore.yaml"), "-p", "0"])

        assert result.exit_code == 2
        MockServer.assert_not_called()


class TestCliStartupErrors:
    @patch("postmock.cli.uvicorn.Server")
    def test_missing_file(self, MockServer, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, ["serve", str(tmp_path / "missing.json")])

        assert result.exit_code == 1
        assert "Failed to start server: Input file not found" in result.output
        MockServer.assert_not_called()

    @patch("postmock.cli.uvicorn.Server")
    def test_unknown_format(self, MockServer, tmp_path):
        f = tmp_path / "doc.json"
        f.write_text('{"hello": "world"}')
        runner = CliRunner()
        result = runner.invoke(main, ["serve", str(f)])

        assert result.exit_code == 1
        assert "neither a valid Postman collection nor OpenAPI spec" in result.output
        MockServer.assert_not_called()

    def test_not_utf8(self, tmp_path):
        f = tmp_path / "latin1.json"
        f.write_bytes(b'{"info": {"name": "\xff"}, "item": []}')
        runner = CliRunner()
        result = runner.invoke(main, ["endpoints", str(f)])

        assert result.exit_code == 1
        assert "Failed to start server" in result.output
        assert "not valid UTF-8" in result.output

    @patch("postmock.cli.uvicorn.Server")
    def test_no_endpoints(self, MockServer, tmp_path):
        f = tmp_path / "empty.json"
        f.write_text('{"info": {"name": "Empty"}, "item": []}')
        runner = CliRunner()
        result = runner.invoke(main, ["serve", str(f)])

        assert result.exit_code == 1
        assert "No valid endpoints found" in result.output
        MockServer.assert_not_called()


class TestCliInteractive:
    @patch("postmock.cli.uvicorn.Server")
    def test_prompts_when_input_missing(self, MockServer):
        answers = "\n".join([str(FIXTURES / "petstore.yaml"), "5001", "100-200", "y", "n", "n"]) + "\n"
        runner = CliRunner()
        result = runner.invoke(main, ["serve"], input=answers)

        assert result.exit_code == 0, result.output
        assert _config(MockServer).port == 5001
        assert "Dynamic responses: Yes" in result.output
        assert "Delay simulation: 100-200ms" in result.output

    @patch("postmock.cli.uvicorn.Server")
    def test_invalid_delay_is_asked_again(self, MockServer):
        answers = "\n".join([str(FIXTURES / "petstore.yaml"), "", "300-100", "", "", "", ""]) + "\n"
        runner = CliRunner()
        result = runner.invoke(main, ["serve", "--interactive"], input=answers)

        assert result.exit_code == 0, result.output
        assert "Invalid delay range" in result.output
        assert _config(MockServer).port == 4000
        assert "Delay simulation" not in result.output


class TestCliHotReload:
    @patch("postmock.cli.uvicorn.Server")
    def test_restarts_on_change(self, MockServer):
        captured = {}

        def fake_create_app(spec, options, **kwargs):
            captured["on_change"] = kwargs["on_change"]
            return create_app(spec, options, **kwargs)

        runs = []

        def fake_run():
            runs.append(1)
            if len(runs) == 1:
                captured["on_change"]()

        MockServer.return_value.run.side_effect = fake_run

        runner = CliRunner()
        with patch("postmock.cli.create_app", side_effect=fake_create_app):
            result = runner.invoke(main, ["serve", str(FIXTURES / "petstore.yaml"), "--hot-reload"])

        assert result.exit_code == 0, result.output
        assert len(runs) == 2
        assert "File changed, restarting server..." in result.output
        assert MockServer.return_value.should_exit is True


class TestCliEndpoints:
    def test_list_postman_endpoints(self):
        runner = CliRunner()
        result = runner.invoke(main, ["endpoints", str(FIXTURES / "sample.postman.json")])

        assert result.exit_code == 0, result.output
        assert "Blog API (postman): 4 endpoints" in result.output
        assert "POST    /api/users/:userId/posts/:postId  Create post" in result.output

    def test_list_openapi_endpoints(self):
        runner = CliRunner()
        result = runner.invoke(main, ["endpoints", str(FIXTURES / "petstore.yaml")])

        assert result.exit_code == 0, result.output
        assert "Swagger Petstore v1.0.0 (openapi): 4 endpoints" in result.output
