"""Incident automator — match open incidents to actions and remediate.

Modules
───────
  rules       — compile action patterns: anchored matcher + substitutions
  resolver    — Alert list → per-action work queues
  executor    — run one command, capture stdout/stderr
  dispatcher  — one worker per action: pause, execute, maybe resolve
  pipeline    — orchestrate compile → fetch → resolve → dispatch
  cli         — argparse entry-point
"""
