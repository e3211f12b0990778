"""Component library and page templates shared by the benchmarks."""

from __future__ import annotations

COMPONENTS: dict[str, str] = {
    "layout": """\
<html>
  <head>
    <title>Site</title>
    <stack name="styles" />
  </head>
  <body attr>
    <header><slot name="header">Site</slot></header>
    <main><yield /></main>
    <stack name="scripts" />
  </body>
</html>
""",
    "card": """\
<script server>
  title = props.title or "Untitled"
  count = props["$count"]
</script>
<push stack="styles"><link id="card-css" rel="stylesheet" href="/card.css"></push>
<article class="card">
  <h2>%% title %%</h2>
  <if condition="count">
    <span class="badge">%% count %%</span>
  </if>
  <yield>No content</yield>
</article>
""",
    "button": '<button class="btn" attr><yield /></button>',
}

MINIMAL = "<p>%% name %%</p>"

SMALL = """\
<ul>
  <for item="item" in="items">
    <li eval:class="'active' if item['active'] else None">%% item["name"] %%</li>
  </for>
</ul>
"""

MEDIUM = """\
<if condition="user">
  <div class="profile">
    <h1>%% user["name"] %%</h1>
    <switch value="user['role']">
      <case case="'admin'"><span>Administrator</span></case>
      <case default><span>Member</span></case>
    </switch>
    <for item="post" in="user['posts']">
      <article>
        <h2>%% post["title"] %%</h2>
        <p>%% post["content"] %%</p>
      </article>
    </for>
  </div>
</if>
<else>
  <p>Please log in.</p>
</else>
"""

LARGE = MEDIUM * 20

PAGE = """\
<x-layout class="home">
  <fill slot="header"><title>Home</title>Welcome</fill>
  <for item="item" in="items">
    <x-card eval:title="item['name']" eval:count="item['id']">
      <p>%% item["name"] %%</p>
      <x-button type="button">Open</x-button>
    </x-card>
  </for>
  <push stack="scripts"><script id="app" src="/app.js"></script></push>
</x-layout>
"""
