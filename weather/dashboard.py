from html import escape
from string import Template

from weather.report import LOCATION, parse_report

PAGE = Template("""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1.0" />
  <title>Weather Logger - $location</title>
  <style>
    *, *::before, *::after { box-sizing: border-box; margin: 0; padding: 0; }
    body { font-family: "Segoe UI", system-ui, -apple-system, sans-serif; background: #f0f4f8; color: #1a202c; min-height: 100vh; display: flex; flex-direction: column; }
    .navbar { background: #1e293b; color: #f1f5f9; padding: 0.85rem 2rem; display: flex; align-items: center; justify-content: space-between; box-shadow: 0 2px 8px rgba(0,0,0,0.15); }
    .navbar .brand { font-size: 1.15rem; font-weight: 600; }
    .navbar .badge { background: #0ea5e9; color: #fff; font-size: 0.65rem; padding: 2px 8px; border-radius: 9999px; font-weight: 700; text-transform: uppercase; }
    .container { flex: 1; max-width: 720px; width: 100%; margin: 2rem auto; padding: 0 1.25rem; }
    .hero { background: linear-gradient(135deg, #0f172a 0%, #1e3a5f 100%); color: #fff; border-radius: 14px; padding: 2.25rem 2.5rem; margin-bottom: 1.5rem; }
    .hero .location { font-size: 0.8rem; text-transform: uppercase; letter-spacing: 1.5px; color: #94a3b8; margin-bottom: 0.25rem; }
    .hero .city { font-size: 1.5rem; font-weight: 700; margin-bottom: 1.25rem; }
    .hero .temp-row { display: flex; align-items: flex-end; gap: 0.75rem; }
    .hero .temp { font-size: 3.5rem; font-weight: 300; line-height: 1; }
    .hero .temp-label { font-size: 0.85rem; color: #cbd5e1; margin-bottom: 0.45rem; }
    .metrics { display: grid; grid-template-columns: repeat(auto-fit, minmax(180px, 1fr)); gap: 1rem; margin-bottom: 1.5rem; }
    .metric-card { background: #fff; border-radius: 12px; padding: 1.35rem 1.5rem; border: 1px solid #e2e8f0; }
    .metric-card .label { font-size: 0.72rem; text-transform: uppercase; letter-spacing: 1px; color: #64748b; margin-bottom: 0.5rem; }
    .metric-card .value { font-size: 1.55rem; font-weight: 600; color: #0f172a; }
    .log-section { background: #fff; border-radius: 12px; border: 1px solid #e2e8f0; overflow: hidden; margin-bottom: 1.5rem; }
    .log-header { padding: 1rem 1.5rem; font-size: 0.82rem; font-weight: 600; text-transform: uppercase; color: #475569; background: #f8fafc; border-bottom: 1px solid #e2e8f0; cursor: pointer; }
    .log-body { max-height: 0; overflow: hidden; transition: max-height 0.3s ease; }
    .log-body.open { max-height: 400px; }
    .log-body pre { padding: 1.25rem 1.5rem; background: #f8fafc; font-family: "Cascadia Code", "Fira Code", Consolas, monospace; font-size: 0.82rem; line-height: 1.7; color: #334155; overflow-x: auto; }
    .refresh-btn { display: inline-block; background: #0ea5e9; color: #fff; padding: 0.6rem 1.4rem; border-radius: 8px; font-size: 0.82rem; font-weight: 600; text-decoration: none; }
    .refresh-btn:hover { background: #0284c7; }
    .site-footer { text-align: center; padding: 1.25rem; font-size: 0.75rem; color: #94a3b8; border-top: 1px solid #e2e8f0; background: #fff; }
    .site-footer span { color: #64748b; font-weight: 500; }
  </style>
</head>
<body>
  <nav class="navbar">
    <div class="brand">Weather Logger</div>
    <div class="badge">Live</div>
  </nav>
  <main class="container">
    <div class="hero">
      <div class="location">Current Weather</div>
      <div class="city">$location</div>
      <div class="temp-row">
        <div class="temp">$temperature</div>
        <div class="temp-label">Observed at $time</div>
      </div>
    </div>
    <div class="metrics">
      <div class="metric-card"><div class="label">Wind Speed</div><div class="value">$wind_speed</div></div>
      <div class="metric-card"><div class="label">Wind Direction</div><div class="value">$wind_direction</div></div>
      <div class="metric-card"><div class="label">Weather Code</div><div class="value">$weather_code</div></div>
      <div class="metric-card"><div class="label">Report Generated</div><div class="value" style="font-size:1rem;">$generated</div></div>
    </div>
    <div style="text-align:center; margin-bottom:1.5rem;">
      <a href="/" class="refresh-btn">Refresh Data</a>
    </div>
    <div class="log-section">
      <div class="log-header" onclick="this.nextElementSibling.classList.toggle('open');">Raw Log Output &#9654;</div>
      <div class="log-body">
        <pre>$raw_log</pre>
      </div>
    </div>
  </main>
  <div class="site-footer">
    Served by <span>FastAPI</span> &bull; Data from <span>Open-Meteo API</span> &bull; No API key required
  </div>
</body>
</html>
""")


def build_html(log_text: str, location: str = LOCATION) -> str:
    fields = parse_report(log_text)
    values = {key: escape(value) for key, value in fields.items()}
    return PAGE.substitute(location=escape(location), raw_log=escape(log_text), **values)
