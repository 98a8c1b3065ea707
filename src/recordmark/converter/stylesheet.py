"""Presentation rules for rendered documents.

The selectors match the class names emitted by the forward pipeline; bump
STYLESHEET_VERSION whenever a rule or class name changes so consumers can
cache by version.
"""

STYLESHEET_VERSION = "1.1.0"

STYLESHEET = """
.recordmark-content {
  font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, Arial, sans-serif;
  font-size: 16px;
  line-height: 1.7;
  color: #2c3e50;
  max-width: 900px;
  margin: 0 auto;
  padding: 20px;
}

/* Headings */
.recordmark-content h1, .recordmark-content h2, .recordmark-content h3,
.recordmark-content h4, .recordmark-content h5, .recordmark-content h6 {
  font-weight: 600;
  margin: 1.5em 0 0.5em;
  color: #1a202c;
}
.recordmark-content h1 { font-size: 2.4em; border-bottom: 3px solid #3498db; padding-bottom: 0.3em; }
.recordmark-content h2 { font-size: 1.9em; border-bottom: 2px solid #95a5a6; padding-bottom: 0.3em; }
.recordmark-content h3 { font-size: 1.5em; }
.recordmark-content h4 { font-size: 1.25em; }
.recordmark-content h5 { font-size: 1.1em; }
.recordmark-content h6 { font-size: 1em; color: #7f8c8d; }

/* Text */
.recordmark-content p { margin: 1em 0; }
.recordmark-content hr { border: none; border-top: 2px solid #ecf0f1; margin: 2em 0; }
.recordmark-content strong { font-weight: 700; }
.recordmark-content em { font-style: italic; }
.recordmark-content mark { background: #fff59d; padding: 2px 4px; }
.recordmark-content del { text-decoration: line-through; color: #95a5a6; }

/* Quotes and callouts */
.recordmark-content blockquote {
  color: #555;
  border-left: 4px solid #3498db;
  margin: 1.5em 0;
  padding: 0.5em 1em;
  background: #f8f9fa;
}
.recordmark-content .callout { padding: 1em; margin: 1em 0; border-radius: 6px; border-left: 4px solid; }
.recordmark-content .callout-info { background: #e3f2fd; border-color: #2196f3; }
.recordmark-content .callout-warning { background: #fff3e0; border-color: #ff9800; }
.recordmark-content .callout-error { background: #ffebee; border-color: #f44336; }
.recordmark-content .callout-success { background: #e8f5e9; border-color: #4caf50; }

/* Code */
.recordmark-content pre, .recordmark-content code {
  font-family: "Fira Code", Monaco, "Courier New", monospace;
  font-size: 0.9em;
}
.recordmark-content code { background: #f4f4f5; padding: 2px 6px; border-radius: 3px; color: #c0392b; }
.recordmark-content pre {
  background: #1e1e1e;
  color: #d4d4d4;
  padding: 1.2em;
  border-radius: 6px;
  overflow-x: auto;
}
.recordmark-content pre code { background: none; padding: 0; color: inherit; }
.recordmark-content .code-block { margin: 1.5em 0; }
.recordmark-content .code-header {
  background: #2d2d2d;
  color: #d4d4d4;
  padding: 0.5em 1em;
  border-radius: 6px 6px 0 0;
  font-size: 0.85em;
}
.recordmark-content .code-header + pre { border-radius: 0 0 6px 6px; }

/* Lists */
.recordmark-content ul, .recordmark-content ol { margin: 1em 0; padding-left: 2em; }
.recordmark-content li { margin: 0.4em 0; }
.recordmark-content .task-list { list-style: none; padding-left: 0; }
.recordmark-content .task-list-item input[type="checkbox"] { margin-right: 0.5em; }
.recordmark-content dl { margin: 1em 0; }
.recordmark-content dt { font-weight: bold; margin-top: 0.5em; }
.recordmark-content dd { margin-left: 2em; }

/* Tables */
.recordmark-content table { border-collapse: collapse; width: 100%; margin: 1.5em 0; }
.recordmark-content th, .recordmark-content td { border: 1px solid #ddd; padding: 10px 12px; text-align: left; }
.recordmark-content th { background: #3498db; color: white; font-weight: 600; }
.recordmark-content tr:nth-child(even) { background: #f8f9fa; }

/* Links */
.recordmark-content a { color: #3498db; text-decoration: none; }
.recordmark-content a:hover { text-decoration: underline; }
.recordmark-content a.internal { color: #9b59b6; }
.recordmark-content a.external::after { content: "\\2197"; font-size: 0.8em; margin-left: 0.2em; }

/* Media */
.recordmark-content img { max-width: 100%; height: auto; border-radius: 4px; }
.recordmark-content figure { margin: 1.5em 0; text-align: center; }
.recordmark-content figcaption { color: #7f8c8d; font-size: 0.9em; font-style: italic; margin-top: 0.5em; }
.recordmark-content video, .recordmark-content audio { max-width: 100%; }
.recordmark-content .video-embed iframe { width: 100%; aspect-ratio: 16 / 9; border: 0; }

/* Templates */
.recordmark-content .template {
  border: 1px solid #dee2e6;
  border-radius: 6px;
  padding: 0.75em 1em;
  margin: 1em 0;
  background: #fcfcfd;
}
.recordmark-content .template-param { display: block; }

/* Footnotes and citations */
.recordmark-content sup.reference { font-size: 0.8em; }
.recordmark-content .reflist { margin-top: 3em; padding-top: 2em; border-top: 2px solid #ecf0f1; }
.recordmark-content .reflist-heading { font-size: 1.5em; border-bottom: none; }
.recordmark-content .reflist ol { font-size: 0.9em; }
.recordmark-content .backref { margin-right: 0.3em; }
.recordmark-content .reflist.citations { margin-top: 1em; border-top: none; }
.recordmark-content .citation-type { color: #7f8c8d; }

/* Math and diagrams */
.recordmark-content .math-inline { font-family: "Latin Modern Math", "Times New Roman", serif; }
.recordmark-content .math-display { text-align: center; margin: 1.5em 0; font-size: 1.2em; overflow-x: auto; }
.recordmark-content .diagram { margin: 1.5em 0; padding: 1em; background: #f8f9fa; border-radius: 6px; }

/* Table of contents */
.recordmark-toc { background: #f8f9fa; border: 1px solid #dee2e6; border-radius: 6px; padding: 1.5em; margin: 2em 0; }
.recordmark-toc .toc-title { margin-top: 0; font-size: 1.3em; }
.recordmark-toc ul { list-style: none; padding-left: 0; margin: 0; }
.recordmark-toc li { margin: 0.4em 0; }
.recordmark-toc .toc-level-1 { font-weight: 600; }
.recordmark-toc .toc-level-2 { padding-left: 1em; }
.recordmark-toc .toc-level-3 { padding-left: 2em; }
.recordmark-toc .toc-level-4 { padding-left: 3em; }
.recordmark-toc .toc-level-5 { padding-left: 4em; }
.recordmark-toc .toc-level-6 { padding-left: 5em; }
""".lstrip()
