import base64

FAVICON_PNG = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mNkYAAAAAYAAjCB0C8AAAAASUVORK5CYII="
)

NGINX_PAGE = """<!DOCTYPE html>
<html>
<head>
<title>Welcome to nginx!</title>
<style>
    body {
        width: 35em;
        margin: 0 auto;
        font-family: Tahoma, Verdana, Arial, sans-serif;
    }
</style>
</head>
<body>
<h1>Welcome to nginx!</h1>
<p>If you see this page, the nginx web server is successfully installed and
working. Further configuration is required.</p>

<p>For online documentation and support please refer to
<a href="http://nginx.org/">nginx.org</a>.<br/>
Commercial support is available at
<a href="http://nginx.com/">nginx.com</a>.</p>

<p><em>Thank you for using nginx.</em></p>
</body>
</html>
"""

_LANDING_TEMPLATE = """<!DOCTYPE html>
<html lang="zh-CN">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>GitHub 文件加速</title>
<style>
    body {{
        min-height: 100vh;
        margin: 0;
        display: flex;
        align-items: center;
        justify-content: center;
        background: linear-gradient(135deg, #24292e 0%, #0d1117 100%);
        color: #f0f6fc;
        font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, sans-serif;
    }}
    .container {{ width: 100%; max-width: 800px; padding: 40px 20px; text-align: center; }}
    form {{ display: flex; gap: 8px; }}
    input {{ flex: 1; padding: 12px; border-radius: 6px; border: 1px solid rgba(255,255,255,.1);
             background: #161b22; color: inherit; }}
    button {{ padding: 12px 20px; border: 0; border-radius: 6px; background: #58a6ff; color: #0d1117; }}
    .tips {{ margin-top: 24px; font-size: 14px; line-height: 1.8; text-align: left; opacity: .8; }}
</style>
</head>
<body>
<div class="container">
    <h1>GitHub 文件加速</h1>
    <form action="{prefix}" method="get">
        <input name="q" type="text" placeholder="键入 GitHub 文件链接" autofocus required>
        <button type="submit">下载</button>
    </form>
    <div class="tips">
        <p>支持 release、archive 以及文件，右键复制出来的链接都是符合标准的。</p>
        <p>git clone https://your-domain{prefix}github.com/owner/repo</p>
        <p>wget https://your-domain{prefix}github.com/owner/repo/archive/master.zip</p>
        <p>wget https://your-domain{prefix}raw.githubusercontent.com/owner/repo/main/README.md</p>
    </div>
</div>
</body>
</html>
"""


def landing_page(prefix: str = "/") -> str:
    return _LANDING_TEMPLATE.format(prefix=prefix)
