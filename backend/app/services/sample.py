"""Starter document shown to new users; one card of every type."""

SAMPLE_MARKDOWN = """## What is Markdown?
Markdown is a lightweight markup language with plain-text formatting syntax.

## [T/F] Markdown was created by John Gruber
T
John Gruber created Markdown in 2004 with Aaron Swartz.

## Which of the following is a Markdown element?
- [ ] <p>
- [x] #
- [ ] <div>
- [ ] {tag}

The # symbol is used in Markdown to create headings.

## Concept: Front Matter
Front Matter is metadata at the beginning of a Markdown file, often used in static site generators.

## What are the components of a good README file?
A good README file should explain what a project does and how to use it.
%
A good README typically includes:

1. Project title and description
2. Installation instructions
3. Usage examples
4. Features
5. Contributing guidelines
6. License information
"""
