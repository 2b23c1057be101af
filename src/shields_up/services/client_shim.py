"""Client shim generation and placement.

The shim runs inside the rendered page and keeps runtime traffic on the
proxy: fetch and XMLHttpRequest targets are routed to the asset endpoint,
link clicks and window.open go to the page endpoint, and a <base> element
points relative URLs the shim never sees at the true upstream location.
"""

import json
import re
from string import Template

_SHIM_TEMPLATE = Template(
    """<script>
(function(){
  var ORIGIN = $origin;
  var BASE = $base;
  var PREFIXES = [ORIGIN + '/asset?url=', ORIGIN + '/proxy?url='];
  var MEDIA = /\\.(png|jpe?g|gif|webp|svg|pdf)$$/i;

  function isProxied(u){
    return PREFIXES.some(function(p){ return u.indexOf(p) === 0; });
  }
  function toAbs(u){
    try { return new URL(u, BASE).toString(); } catch(e) { return u; }
  }
  function toAsset(u){
    var abs = toAbs(String(u));
    if (isProxied(abs) || !/^https?:/i.test(abs)) return abs;
    return ORIGIN + '/asset?url=' + encodeURIComponent(abs);
  }
  function toPage(u){
    var abs = toAbs(String(u));
    if (isProxied(abs) || !/^https?:/i.test(abs)) return abs;
    return ORIGIN + '/proxy?url=' + encodeURIComponent(abs);
  }

  var nativeFetch = window.fetch;
  if (nativeFetch) {
    window.fetch = function(input, init){
      if (typeof input === 'string' || input instanceof URL) {
        input = toAsset(input);
      } else if (input && input.url) {
        input = new Request(toAsset(input.url), input);
      }
      return nativeFetch.call(this, input, init);
    };
  }

  var nativeOpen = XMLHttpRequest.prototype.open;
  XMLHttpRequest.prototype.open = function(method, url){
    var args = Array.prototype.slice.call(arguments);
    try { args[1] = toAsset(url); } catch(e) {}
    return nativeOpen.apply(this, args);
  };

  document.addEventListener('click', function(e){
    var a = e.target && e.target.closest && e.target.closest('a[href]');
    if (!a) return;
    var href = a.getAttribute('href');
    if (!href || href.charAt(0) === '#' || /^javascript:/i.test(href)) return;
    e.preventDefault();
    var abs = toAbs(href);
    var path = abs;
    try { path = new URL(abs).pathname; } catch(err) {}
    window.location.href = MEDIA.test(path) ? toAsset(abs) : toPage(abs);
  }, true);

  var nativeWindowOpen = window.open;
  window.open = function(u, target, features){
    return nativeWindowOpen.call(window, u ? toPage(u) : u, target, features);
  };

  var baseEl = document.createElement('base');
  baseEl.href = BASE;
  if (document.head) document.head.prepend(baseEl);
})();
</script>"""
)

_HEAD_CLOSE = re.compile(r"</head\s*>", re.IGNORECASE)
_BODY_OPEN = re.compile(r"<body\b[^>]*>", re.IGNORECASE)


def _js_string(value: str) -> str:
    # JSON is a valid JS literal; no raw "<" means no </script> or <!-- inside it
    return json.dumps(value).replace("<", "\\u003c")


def build_client_shim(origin: str, base_url: str) -> str:
    """Render the shim script block.

    Args:
        origin: Public origin of this proxy
        base_url: True upstream URL of the page

    Returns:
        A complete <script>...</script> element
    """
    return _SHIM_TEMPLATE.substitute(origin=_js_string(origin), base=_js_string(base_url))


def inject_client_shim(html: str, base_url: str, origin: str) -> str:
    """Insert the shim as early as possible in the document.

    Placement: immediately before </head>, else immediately after the
    opening <body> tag, else in front of the whole document.
    """
    shim = build_client_shim(origin, base_url)

    head_close = _HEAD_CLOSE.search(html)
    if head_close:
        return html[: head_close.start()] + shim + html[head_close.start():]

    body_open = _BODY_OPEN.search(html)
    if body_open:
        return html[: body_open.end()] + shim + html[body_open.end():]

    return shim + html
