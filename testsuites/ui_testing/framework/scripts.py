# ================================================================================
# Browser Scripts
# ================================================================================
#
# JavaScript snippets evaluated through Driver.execute_script.
#
# Each snippet is a function expression taking at most one argument, which is
# the calling convention of Playwright's page.evaluate. Elements passed as the
# argument arrive as DOM nodes.
#
# ================================================================================

# Well-known loading indicators. A visible match means the page is still busy.
LOADING_SELECTORS = (
    ".loading",
    ".spinner",
    ".overlay",
    ".modal-backdrop",
    "[class*='loading']",
    "[class*='spinner']",
)

READY_STATE = "() => document.readyState"

# jQuery and Angular count as idle when absent.
AJAX_IDLE = """() => {
    const jqueryIdle = window.jQuery ? window.jQuery.active === 0 : true;
    let angularIdle = true;
    if (typeof window.getAllAngularTestabilities === 'function') {
        angularIdle = window.getAllAngularTestabilities().every(t => t.isStable());
    }
    return jqueryIdle && angularIdle;
}"""

VISIBLE_LOADING_COUNT = """(selectors) => {
    let count = 0;
    for (const selector of selectors) {
        for (const el of document.querySelectorAll(selector)) {
            const style = window.getComputedStyle(el);
            const shown = style.visibility !== 'hidden' && style.display !== 'none'
                && (el.offsetWidth > 0 || el.offsetHeight > 0 || el.getClientRects().length > 0);
            if (shown) {
                count += 1;
            }
        }
    }
    return count;
}"""

PAGE_RESPONSIVE = (
    "() => document.readyState === 'complete' && "
    "(window.jQuery ? window.jQuery.active === 0 : true)"
)

JS_CLICK = "(el) => el.click()"

RESET_VALUE = """(el) => {
    el.value = '';
    el.dispatchEvent(new Event('input', { bubbles: true }));
}"""

# True when another node sits on top of the element's centre point.
IS_OBSTRUCTED = """(el) => {
    const rect = el.getBoundingClientRect();
    const top = document.elementFromPoint(rect.left + rect.width / 2, rect.top + rect.height / 2);
    return !!top && top !== el && !el.contains(top);
}"""

SCROLL_INTO_VIEW = "(el) => el.scrollIntoView({ block: 'center', inline: 'nearest' })"

SCROLL_TO_POSITION = "([x, y]) => window.scrollTo(x, y)"

SCROLL_MID_PAGE = "() => window.scrollTo(0, document.body.scrollHeight / 2)"
