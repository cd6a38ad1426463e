from __future__ import annotations

"""Content of the "About This Tool" panel."""

SUPPORTED_FORMATS = (
    ("2M, 1.5M", "millions"),
    ("900K, 20K", "thousands"),
    ("&lt; 5k", "less than values"),
    ("1000, 5000", "raw numbers"),
)


def render_about_html() -> str:
    formats = "\n".join(f"    <li>{sample} ({desc})</li>" for sample, desc in SUPPORTED_FORMATS)
    return f"""<div style="font-family: Arial, sans-serif; padding: 20px;">
  <h2>Download Sorter</h2>
  <p><strong>What it does:</strong></p>
  <ul>
    <li>Sorts your app data by "Downloads Last Month"</li>
    <li>Preserves all hyperlinks and formulas</li>
    <li>Handles values like 2M, 900K, &lt; 5k correctly</li>
    <li>Allows restoration to original order</li>
  </ul>
  <p><strong>How to use:</strong></p>
  <ol>
    <li>Run <code>download-sorter sort</code> (highest downloads first)</li>
    <li>Or <code>download-sorter sort --asc</code> (lowest first)</li>
    <li>Use <code>download-sorter restore</code> to undo the last sort</li>
  </ol>
  <p><strong>Supported formats:</strong></p>
  <ul>
{formats}
  </ul>
</div>
"""
