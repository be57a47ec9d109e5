from search_api import search_bp, MAX_API_COUNT, MAX_API_DIGITS
from flask import Flask, render_template_string

from primesearch import __version__

app = Flask(__name__)
app.register_blueprint(search_bp)

PAGE = """<!doctype html><html><head>
<meta charset="utf-8"><meta name="viewport" content="width=device-width,initial-scale=1">
<title>primesearch</title>
<style>
body{font-family:system-ui,-apple-system,Segoe UI,Roboto,Ubuntu,Helvetica,Arial,sans-serif;margin:0;background:#fafafa;color:#111}
.wrap{max-width:860px;margin:40px auto;padding:0 16px}.card{background:#fff;border:1px solid #eee;border-radius:12px;padding:16px;margin:18px 0}
label{font-size:12px;color:#555}input,button{font-size:14px;padding:10px;border-radius:8px;border:1px solid #d0d0d0}
input{width:100%;box-sizing:border-box}button{background:#111;color:#fff;cursor:pointer}
.grid{display:grid;grid-template-columns:1fr 1fr;gap:10px}.mono{font-family:ui-monospace,Menlo,Consolas,monospace}
pre{white-space:pre-wrap;word-break:break-all;background:#f6f6f6;border:1px solid #eee;border-radius:8px;padding:10px}
.note{color:#555;font-size:12px}
</style></head><body><div class="wrap">
<h1>primesearch <span class="note">{{version}}</span></h1>

<div class="card">
  <h3>Find probable primes</h3>
  <div class="grid">
    <div><label>Primes (max {{max_count}})</label><input id="s_n" value="3"/></div>
    <div><label>Digits (10..{{max_digits}})</label><input id="s_d" value="100"/></div>
    <div><label>Miller-Rabin rounds</label><input id="s_p" value="8"/></div>
    <div><label>Seed (optional)</label><input id="s_s"/></div>
  </div>
  <div style="margin-top:8px"><button id="s_go">Search</button></div>
  <pre id="s_out" class="mono">-</pre>
</div>

<div class="card">
  <h3>Test one number</h3>
  <div class="grid">
    <div><label>n (odd, &gt; 4)</label><input id="t_n" class="mono"/></div>
    <div><label>Rounds</label><input id="t_p" value="20"/></div>
  </div>
  <div style="margin-top:8px"><button id="t_go">Test</button></div>
  <pre id="t_out" class="mono">-</pre>
</div>
</div>
<script>
async function post(url,p){const r=await fetch(url,{method:'POST',headers:{'Content-Type':'application/json'},body:JSON.stringify(p)});return await r.json();}
const v=id=>(document.querySelector(id).value||'').trim();
document.querySelector('#s_go').onclick=async()=>{const out=document.querySelector('#s_out');out.textContent='Searching…';try{const p={count:v('#s_n'),digits:v('#s_d'),rounds:v('#s_p')};if(v('#s_s'))p.seed=v('#s_s');const res=await post('/api/search',p);out.textContent=res.error?('Error: '+res.error):(res.primes.join('\\n')+'\\n\\nseed='+res.seed+' tested='+res.candidates_tested+' '+res.search_ms+'ms');}catch(e){out.textContent='Error: '+e;}};
document.querySelector('#t_go').onclick=async()=>{const out=document.querySelector('#t_out');out.textContent='Testing…';try{const res=await post('/api/test',{n:v('#t_n'),rounds:v('#t_p')});out.textContent=res.error?('Error: '+res.error):res.verdict;}catch(e){out.textContent='Error: '+e;}};
</script></body></html>"""

@app.get("/")
def home():
    return render_template_string(PAGE, version=__version__, max_count=MAX_API_COUNT, max_digits=MAX_API_DIGITS)

if __name__ == "__main__":
    app.run("127.0.0.1", 8082, debug=True)
