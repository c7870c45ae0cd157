MINDMAP_SYSTEM_PROMPT = "Follow the user message"

MINDMAP_PROMPT = """
Generate a hierarchical mind map structure in JSON format for the central topic: "{INSERT_TOPIC_HERE}".
The JSON should represent a tree structure with a root node.
The root node object should have a "name" property (which should be the central topic: "{INSERT_TOPIC_HERE}") and an optional "children" array.
Each child in the "children" array should be an object with its own "name" property and an optional "children" array for sub-topics.

Provide between 3 to 6 main branches (direct children of the root).
Each main branch can have 2 to 4 sub-topics.
Limit the total depth of the mind map to 3 levels (root, main branches, sub-topics of main branches).

Example of the desired JSON structure:
{
  "name": "Central Topic",
  "children": [
    {
      "name": "Main Branch 1",
      "children": [
        { "name": "Sub-topic 1.1" },
        { "name": "Sub-topic 1.2" }
      ]
    },
    { "name": "Main Branch 2" },
    {
      "name": "Main Branch 3",
      "children": [
        { "name": "Sub-topic 3.1" },
        { "name": "Sub-topic 3.2" },
        { "name": "Sub-topic 3.3" }
      ]
    }
  ]
}

The names of the nodes should be concise and relevant to the topic.
Ensure the output is ONLY the JSON object, without any surrounding text, explanations, or markdown fences like ```json or ```.
"""
