"""End-to-end tests for rewrite_source."""

import pytest

from route_codemod import RejectReason, Rejected, RewriteConfig, Rewritten, Unchanged, rewrite_source
from route_codemod.core.ast import parse_source
from tests.conftest import outdent


def rewrite(source: str, language: str = "tsx", config: RewriteConfig | None = None) -> str:
    result = rewrite_source(outdent(source), language, config)
    assert isinstance(result, Rewritten), result
    return result.text


def test_loader_only() -> None:
    output = rewrite(
        """
        export function loader() {
          return { hello: "world" };
        }
        """
    )
    assert output == outdent(
        """
        export default defineRoute({
          serverLoader() {
            return { hello: "world" };
          }
        });
        """
    )


def test_expression_component() -> None:
    assert rewrite("export default () => <div>hello</div>;\n") == outdent(
        """
        export default defineRoute({
          Component: () => <div>hello</div>
        });
        """
    )


def test_component_with_loader_data() -> None:
    output = rewrite(
        """
        import { useLoaderData } from "@remix-run/react";

        export function loader() {
          return { hello: "world" };
        }

        export default function () {
          const data = useLoaderData<typeof loader>();
          return <h1>{data.hello}</h1>;
        }
        """
    )
    assert output == outdent(
        """
        import { useLoaderData } from "@remix-run/react";

        export default defineRoute({
          serverLoader() {
            return { hello: "world" };
          },
          Component({ loaderData: data }) {
            return <h1>{data.hello}</h1>;
          }
        });
        """
    )


def test_client_loader_with_hydrate_flag() -> None:
    output = rewrite(
        """
        import type { ClientLoaderFunctionArgs, LoaderFunctionArgs } from "@remix-run/node";
        import { useLoaderData } from "@remix-run/react";

        export async function loader({ request }: LoaderFunctionArgs) {
          return getData(request);
        }

        export async function clientLoader({ request, serverLoader }: ClientLoaderFunctionArgs) {
          return serverLoader();
        }

        clientLoader.hydrate = true;

        export function HydrateFallback() {
          return <p>Loading...</p>;
        }

        export default function Component() {
          const data = useLoaderData<typeof loader>();
          return <div>{data.title}</div>;
        }
        """
    )
    assert output == outdent(
        """
        import type { ClientLoaderFunctionArgs, LoaderFunctionArgs } from "@remix-run/node";
        import { useLoaderData } from "@remix-run/react";

        export default defineRoute({
          async serverLoader({ request }) {
            return getData(request);
          },
          async clientLoader({ request, serverLoader }) {
            return serverLoader();
          },
          clientLoaderHydrate: true,
          HydrateFallback() {
            return <p>Loading...</p>;
          },
          Component({ loaderData: data }) {
            return <div>{data.title}</div>;
          }
        });
        """
    )


def test_action_and_loader_data() -> None:
    output = rewrite(
        """
        import { Form, useActionData, useLoaderData } from "@remix-run/react";

        export const action = async ({ request }: ActionFunctionArgs) => {
          return save(await request.formData());
        };

        export default function Edit() {
          const loaderData = useLoaderData();
          const actionData = useActionData();
          return <Form method="post">{actionData?.error ?? loaderData.name}</Form>;
        }
        """
    )
    assert "async serverAction({ request }) {" in output
    assert "Component({ loaderData, actionData }) {" in output
    assert "useActionData()" not in output
    assert 'import { Form, useActionData, useLoaderData } from "@remix-run/react";' in output


def test_entries_follow_source_order() -> None:
    output = rewrite(
        """
        export default function Index() {
          return null;
        }

        export function loader() {
          return null;
        }
        """
    )
    assert output.index("Component()") < output.index("serverLoader()")


def test_expression_entries_follow_positioned_ones() -> None:
    output = rewrite(
        """
        export const meta = () => [{ title: "Home" }];
        export const links = () => [];

        export function loader() {
          return null;
        }
        """
    )
    assert output == outdent(
        """
        export default defineRoute({
          serverLoader() {
            return null;
          },
          links: () => [],
          meta: () => [{ title: "Home" }]
        });
        """
    )


def test_exports_sharing_a_line() -> None:
    assert rewrite("export const links = () => []; export default () => null;\n") == outdent(
        """
        export default defineRoute({
          Component: () => null,
          links: () => []
        });
        """
    )


def test_keeps_unrelated_code() -> None:
    output = rewrite(
        """
        const title = "Home";

        export function unrelated() {
          return title;
        }

        export const meta = () => [{ title }];

        function helper() {
          return 1;
        }
        """
    )
    assert output == outdent(
        """
        const title = "Home";

        export function unrelated() {
          return title;
        }

        function helper() {
          return 1;
        }

        export default defineRoute({
          meta: () => [{ title }]
        });
        """
    )


def test_generator_keeps_function_text() -> None:
    output = rewrite(
        """
        export function* loader() {
          yield 1;
        }
        """
    )
    assert output == outdent(
        """
        export default defineRoute({
          serverLoader: function* loader() {
            yield 1;
          }
        });
        """
    )


def test_javascript_jsx() -> None:
    output = rewrite(
        """
        export const loader = () => {
          return { ok: true };
        };

        export default function Index() {
          return <div />;
        }
        """,
        language="javascript",
    )
    assert "serverLoader() {" in output
    assert "Component() {" in output


def test_custom_config() -> None:
    config = RewriteConfig(builder_name="defineView", default_export_key="View")
    assert rewrite("export default () => null;\n", config=config) == outdent(
        """
        export default defineView({
          View: () => null
        });
        """
    )


@pytest.mark.parametrize("source", ["", "   \n\n"])
def test_blank_source_is_unchanged(source: str) -> None:
    assert rewrite_source(source, "tsx") == Unchanged(text=source)


def test_no_route_exports_is_unchanged() -> None:
    source = "export function unrelated() {}\nconst value = 1;\n"
    assert rewrite_source(source, "tsx") == Unchanged(text=source)


def test_syntax_error_is_rejected() -> None:
    result = rewrite_source("export function loader( {\n", "tsx")
    assert isinstance(result, Rejected)
    assert result.reason is RejectReason.SYNTAX_ERROR
    assert result.diagnostics


def test_output_is_not_rewritten_twice() -> None:
    output = rewrite(
        """
        export function loader() {
          return null;
        }

        export default function Index() {
          return null;
        }
        """
    )
    result = rewrite_source(output, "tsx")
    assert isinstance(result, Rejected)
    assert result.reason is RejectReason.ALREADY_MIGRATED


def test_non_ascii_source() -> None:
    output = rewrite(
        """
        const greeting = "héllo wörld";

        export default function Index() {
          return <p>{greeting} ✓</p>;
        }
        """
    )
    assert output == outdent(
        """
        const greeting = "héllo wörld";

        export default defineRoute({
          Component() {
            return <p>{greeting} ✓</p>;
          }
        });
        """
    )


def test_single_line_loader() -> None:
    result = rewrite_source("export function loader() { return 1; }", "tsx")
    assert result == Rewritten(text="export default defineRoute({\n  serverLoader() { return 1; }\n});\n")


def test_binding_named_like_its_role_is_shorthand() -> None:
    output = rewrite(
        """
        export default function Index() {
          const loaderData = useLoaderData();
          return <p>{loaderData.name}</p>;
        }
        """
    )
    assert output == outdent(
        """
        export default defineRoute({
          Component({ loaderData }) {
            return <p>{loaderData.name}</p>;
          }
        });
        """
    )


def test_code_after_export_on_its_line_stays_there() -> None:
    result = rewrite_source("const a = 1\nexport const meta = () => []; const b = 2\n", "tsx")
    assert result == Rewritten(
        text="const a = 1\nconst b = 2\n\nexport default defineRoute({\n  meta: () => []\n});\n"
    )
    assert not parse_source(result.text, "tsx").has_errors


def test_indented_first_export_leaves_no_blank_line() -> None:
    result = rewrite_source("   export function loader() { return 1; }\nconst x = 1\n", "tsx")
    assert result == Rewritten(
        text="const x = 1\n\nexport default defineRoute({\n  serverLoader() { return 1; }\n});\n"
    )
