"""
Parameterized per-site HTML reports.

Renders one document per site identifier from a single template, passing
the site as the only parameter. The merged observation table is the report
data; when it has a site column the report shows that site's rows,
otherwise the whole table.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import pandas as pd
from jinja2 import BaseLoader, Environment

from amphibian_merge.config import ReportConfig
from amphibian_merge.qa.reporters import compute_missingness
from amphibian_merge.utils.io import ensure_dir

logger = logging.getLogger(__name__)


###############################################################################
# T E M P L A T E S
###############################################################################

HTML_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{{ title }} - Site {{ site }}</title>
<style>
  body { font-family: sans-serif; margin: 2em; }
  table { border-collapse: collapse; font-size: 0.9em; }
  th, td { border: 1px solid #ccc; padding: 0.25em 0.5em; text-align: left; }
  th { background: #eee; }
</style>
</head>
<body>
<h1>{{ title }}</h1>
<h2>Site {{ site }}</h2>
<p>Generated {{ generated }}. {{ n_rows }} observations{% if filtered %} for {{ site_column }} = {{ site }}{% endif %}.</p>

<h3>Missing values</h3>
<table>
<tr><th>Column</th><th>Missing</th></tr>
{% for column, rate in missingness %}<tr><td>{{ column }}</td><td>{{ "%.1f"|format(rate * 100) }}%</td></tr>
{% endfor %}</table>

<h3>Observations</h3>
{% if rows %}<table>
<tr>{% for column in columns %}<th>{{ column }}</th>{% endfor %}</tr>
{% for row in rows %}<tr>{% for value in row %}<td>{{ value }}</td>{% endfor %}</tr>
{% endfor %}</table>
{% if truncated %}<p>Showing the first {{ rows|length }} rows.</p>{% endif %}
{% else %}<p>No observations.</p>{% endif %}
</body>
</html>
"""


###############################################################################
# F U N C T I O N S
###############################################################################


def render_site_report(
    data: pd.DataFrame,
    site: str,
    cfg: Optional[ReportConfig] = None,
) -> str:
    """Render the HTML report for a single site."""
    cfg = cfg or ReportConfig()

    filtered = cfg.site_column in data.columns
    site_data = data[data[cfg.site_column] == site] if filtered else data
    shown = site_data.head(cfg.max_rows)

    template = (
        Environment(loader=BaseLoader(), autoescape=True)
        .from_string(HTML_TEMPLATE)
    )
    return template.render(
        title=cfg.title,
        site=site,
        site_column=cfg.site_column,
        filtered=filtered,
        generated=datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
        n_rows=len(site_data),
        missingness=list(compute_missingness(site_data).items()),
        columns=list(shown.columns),
        rows=shown.astype(object).where(shown.notna(), "").values.tolist(),
        truncated=len(site_data) > len(shown),
    )


def render_site_reports(
    data: pd.DataFrame,
    output_dir: Path,
    cfg: Optional[ReportConfig] = None,
) -> List[Path]:
    """
    Render one report per configured site.

    Args:
        data: Merged observation table
        output_dir: Directory receiving ``report_site<ID>.html`` files
        cfg: Report settings (sites, file pattern, row limit)

    Returns:
        Paths of the written reports, in site order
    """
    cfg = cfg or ReportConfig()
    output_dir = ensure_dir(Path(output_dir))

    written = []
    for site in cfg.sites:
        html = render_site_report(data, site, cfg)
        path = output_dir / cfg.filename_pattern.format(site=site)
        path.write_text(html, encoding="utf-8")
        written.append(path)
        logger.info(f"  - Site {site} → {path.name}")

    logger.info(f"Rendered {len(written)} site reports in {output_dir}")
    return written
