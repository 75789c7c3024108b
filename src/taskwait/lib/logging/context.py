import sys
import traceback


def format_raised_exception_info_as_dict(err: BaseException) -> dict:
    _, _, tb = sys.exc_info()

    exc_ctx: dict = {
        "captured_exception_info": {
            "type": err.__class__.__name__,
            "string": str(err),
        }
    }

    try:
        exc_ctx["captured_exception_info"] = {
            **exc_ctx["captured_exception_info"],
            **[
                {"file": fs.filename, "line": fs.lineno, "func": fs.name}
                for fs in traceback.extract_tb(tb or err.__traceback__)
                # attempt to show only *our* code, not the many layers of library code
                if "/taskwait/" in fs.filename
            ][-1],
        }

    # We did our best to construct useful traceback info
    except IndexError:
        pass

    return exc_ctx
