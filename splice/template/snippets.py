"""Built-in templates used by the default content generator."""

PROVIDER_IMPORT = 'import { {{ provider.component }} } from {{ provider.package | js_string }};\n'

PROVIDER_OPEN = "<{{ provider.component }} apiKey={process.env.{{ provider.api_key_env }}!}>"

PROVIDER_LAYOUT = """\
{{ import_line }}
export default function RootLayout({ children }: { children: React.ReactNode }) {
  return (
    <html lang="en">
      <body>
        {{ open_tag }}{children}</{{ provider.component }}>
      </body>
    </html>
  );
}
"""

COMPONENT_BLOCK = """\
// splice:component:{{ rec.name }}
export const {{ rec.name | camel_case }}Component = {
  name: {{ rec.name | js_string }},
  description: {{ (rec.reason or rec.name) | js_string }},
};
"""

TOOL_BLOCK = """\
// splice:tool:{{ rec.name }}
export const {{ rec.name }}Schema = {{ schema }};

/** {{ rec.reason or rec.name }} */
export async function {{ rec.name }}(input: z.infer<typeof {{ rec.name }}Schema>) {
  throw new Error("{{ rec.name }} is not implemented yet");
}
"""

TOOL_HEADER = 'import { z } from "zod";\n'

INTERACTABLE_BLOCK = """\
// splice:interactable:{{ rec.name }}
export const Interactable{{ rec.name | pascal_case }} = withInteractable({{ rec.name | pascal_case }}, {
  componentName: {{ rec.name | js_string }},
  description: {{ (rec.reason or rec.name) | js_string }},
});
"""

INTERACTABLE_HEADER = 'import { withInteractable } from {{ provider.package | js_string }};\n'

CHAT_WIDGET_HEADER = '"use client";\n'

CHAT_WIDGET_IMPORT = (
    'import { MessageThreadCollapsible } from "@/components/tambo/message-thread-collapsible";\n'
)

CHAT_WIDGET_BLOCK = """\
// splice:chat-widget
export function ChatWidget() {
  return <MessageThreadCollapsible className="fixed {{ position_classes }}" />;
}
"""

POSITION_CLASSES = {
    "bottom-right": "bottom-4 right-4",
    "bottom-left": "bottom-4 left-4",
    "top-right": "top-4 right-4",
    "top-left": "top-4 left-4",
    "inline": "relative",
}
