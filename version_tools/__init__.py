"""
Script: version_tools package
What: Holds the release-version resolver used by CI workflows.
Doing: Groups the tag reader, patch resolver, branch classifier, composer, and output writers.
Why: Keeps version logic readable and testable instead of spreading it across workflow YAML.
Goal: Provide one importable home for deterministic release version calculation.
"""
