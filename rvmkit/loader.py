"""
The rvmkit loader scans directories for python loadable code and organizes
the code into the execution module interface used by rvmkit.

Every loaded module gets ``__opts__``, ``__grains__``, ``__context__`` and
``__salt__`` injected. ``__salt__`` is the loader itself, so modules call
each other as ``__salt__["rvm.list_strings"]()``.
"""

import importlib.util
import inspect
import logging
import os
import sys
import time
from collections.abc import MutableMapping

import rvmkit.grains.core
from rvmkit.exceptions import LoaderError

log = logging.getLogger(__name__)

RVMKIT_BASE_PATH = os.path.abspath(os.path.dirname(__file__))
LOADED_BASE_NAME = "rvmkit.loaded"

# The grain functions called to build the grains dictionary, in order
GRAIN_FUNCS = (rvmkit.grains.core.os_data,)


def _module_dirs(opts, ext_type):
    """
    Return the directories execution modules are searched in. Directories
    from the ``module_dirs`` option take precedence over the builtin ones.
    """
    ext_dirs = [path for path in opts.get("module_dirs", []) if os.path.isdir(path)]
    return ext_dirs + [os.path.join(RVMKIT_BASE_PATH, ext_type)]


def minion_mods(opts, context=None, whitelist=None, loaded_base_name=None):
    """
    Load execution modules

    Returns a dictionary of execution modules appropriate for the current
    system by evaluating the __virtual__() function in each module.

    :param dict opts: The rvmkit options dictionary

    :param dict context: A dict which should be made present inside
                            generated modules in __context__

    :param list whitelist: A list of modules which should be whitelisted.

    .. code-block:: python

        import rvmkit.config
        import rvmkit.loader

        __opts__ = rvmkit.config.rvmkit_config('/etc/rvmkit/rvmkit')
        __opts__['grains'] = rvmkit.loader.grains(__opts__)
        __salt__ = rvmkit.loader.minion_mods(__opts__)
        __salt__['rvm_helpers.ruby_installed']('ruby-2.0.0')
    """
    if context is None:
        context = {}
    return LazyLoader(
        _module_dirs(opts, "modules"),
        opts,
        tag="module",
        pack={"__context__": context},
        whitelist=whitelist,
        loaded_base_name=loaded_base_name,
    )


def grains(opts):
    """
    Return the grains for the host, with the static ``grains`` from the
    configuration layered on top of the detected ones.

    .. code-block:: python

        import rvmkit.config
        import rvmkit.loader

        __opts__ = rvmkit.config.rvmkit_config('/etc/rvmkit/rvmkit')
        __grains__ = rvmkit.loader.grains(__opts__)
        print(__grains__['platform'])
    """
    grains_data = {}
    for fun in GRAIN_FUNCS:
        start = time.time()
        try:
            ret = fun()
        except Exception:  # pylint: disable=broad-except
            log.critical(
                "Failed to load grains defined in grain file %s in "
                "function %s, error:\n",
                fun.__module__,
                fun.__name__,
                exc_info=True,
            )
            continue
        log.trace("Loading %s grain took %s seconds", fun.__name__, time.time() - start)
        if not isinstance(ret, dict):
            continue
        grains_data.update(ret)

    static_grains = opts.get("grains") or {}
    if static_grains:
        log.debug("Applying static grains: %s", sorted(static_grains))
        grains_data.update(static_grains)
    return grains_data


class LazyLoader(MutableMapping):
    """
    A pseudo-dictionary which has a set of keys which are the name of the
    module and function, delimited by a dot. When the value of the key is
    accessed, the function is loaded from disk.

    Modules are loaded under a private package name so each loader gets its
    own copy of the module globals.
    """

    def __init__(
        self,
        module_dirs,
        opts=None,
        tag="module",
        pack=None,
        whitelist=None,
        loaded_base_name=None,
    ):
        self.opts = opts if opts is not None else {}
        self.module_dirs = module_dirs
        self.tag = tag
        self.whitelist = whitelist
        self.loaded_base_name = loaded_base_name or LOADED_BASE_NAME
        self.disabled = set(self.opts.get("disable_modules", []))

        self.pack = {} if pack is None else dict(pack)
        self.pack.setdefault("__context__", {})
        self.pack["__opts__"] = self.opts
        self.pack["__grains__"] = self.opts.get("grains", {})
        self.pack["__salt__"] = self

        self._dict = {}
        self.loaded_modules = {}
        self.missing_modules = {}
        self.loaded_files = set()
        self._loading = set()
        self._refresh_file_mapping()

    def __repr__(self):
        return f"<{self.__class__.__name__} module_dirs={self.module_dirs!r}>"

    def _refresh_file_mapping(self):
        """
        Map every loadable file name to its path. The first directory which
        provides a name wins.
        """
        self.file_mapping = {}
        for mod_dir in self.module_dirs:
            try:
                filenames = sorted(os.listdir(mod_dir))
            except OSError:
                log.trace("Cannot list directory %s", mod_dir)
                continue
            for filename in filenames:
                if filename.startswith("_") or not filename.endswith(".py"):
                    continue
                name = filename[:-3]
                if name in self.file_mapping:
                    continue
                self.file_mapping[name] = os.path.join(mod_dir, filename)

    def __getitem__(self, item):
        if item not in self._dict:
            self._load(item)
        try:
            return self._dict[item]
        except KeyError:
            raise KeyError(self.missing_fun_string(item)) from None

    def __setitem__(self, key, value):
        self._dict[key] = value

    def __delitem__(self, key):
        del self._dict[key]

    def __iter__(self):
        self._load_all()
        return iter(self._dict)

    def __len__(self):
        self._load_all()
        return len(self._dict)

    def __contains__(self, item):
        if item not in self._dict:
            self._load(item)
        return item in self._dict

    def missing_fun_string(self, function_name):
        """
        Return the error string for a missing function.
        """
        mod_name = function_name.split(".", 1)[0]
        if mod_name in self.loaded_modules:
            return f"'{function_name}' is not available."
        reason = self.missing_modules.get(mod_name)
        if reason:
            return "'{}' __virtual__ returned False: {}".format(mod_name, reason)
        return f"'{mod_name}' __virtual__ returned False"

    def _load(self, key):
        """
        Load the module which provides ``key``. Files are tried by name
        first; virtual names can only be found by loading the rest.
        """
        if not isinstance(key, str) or "." not in key:
            return
        mod_name = key.split(".", 1)[0]
        if mod_name in self.loaded_modules or mod_name in self.missing_modules:
            return
        if mod_name in self.file_mapping:
            self._load_module(mod_name)
            if key in self._dict:
                return
        for name in self.file_mapping:
            if key in self._dict:
                return
            self._load_module(name)

    def _load_all(self):
        """
        Load all of them
        """
        for name in self.file_mapping:
            self._load_module(name)

    def _load_module(self, name):
        if name in self.loaded_files or name in self._loading:
            return False
        if self.whitelist and name not in self.whitelist:
            return False
        if name in self.disabled:
            log.trace("Skipping %s, it is disabled by configuration", name)
            self.loaded_files.add(name)
            return False

        fpath = self.file_mapping[name]
        mod_namespace = ".".join((self.loaded_base_name, self.tag, name))
        self._loading.add(name)
        try:
            spec = importlib.util.spec_from_file_location(mod_namespace, fpath)
            mod = importlib.util.module_from_spec(spec)
            sys.modules[mod_namespace] = mod
            spec.loader.exec_module(mod)
        except Exception:  # pylint: disable=broad-except
            log.error(
                "Failed to import %s %s:\n", self.tag, name, exc_info=True
            )
            sys.modules.pop(mod_namespace, None)
            self.missing_modules[name] = f"Failed to import {name}"
            self.loaded_files.add(name)
            self._loading.discard(name)
            return False

        for p_name, p_value in self.pack.items():
            setattr(mod, p_name, p_value)

        # Call a module's initialization method if it exists
        module_init = getattr(mod, "__init__", None)
        if inspect.isfunction(module_init):
            try:
                module_init(self.opts)
            except TypeError as exc:
                log.error(exc)
            except Exception:  # pylint: disable=broad-except
                log.error(
                    "Error calling the __init__ function of %s", name, exc_info=True
                )

        try:
            virtual_ret, module_name, virtual_err = self._process_virtual(mod, name)
        finally:
            self._loading.discard(name)
            self.loaded_files.add(name)

        if not virtual_ret:
            self.missing_modules[module_name] = virtual_err
            self.missing_modules[name] = virtual_err
            return False

        func_alias = getattr(mod, "__func_alias__", {})
        for attr in dir(mod):
            if attr.startswith("_"):
                continue
            func = getattr(mod, attr)
            if not inspect.isfunction(func):
                continue
            # Functions imported from other modules are not part of the
            # module's interface
            if getattr(func, "__module__", None) != mod.__name__:
                continue
            funcname = func_alias.get(attr, attr)
            full_funcname = f"{module_name}.{funcname}"
            if full_funcname in self._dict:
                log.trace(
                    "%s is already provided, skipping it from %s", full_funcname, name
                )
                continue
            self._dict[full_funcname] = func
        self.loaded_modules[module_name] = mod
        log.trace("Loaded %s as virtual %s", name, module_name)
        return True

    def _process_virtual(self, mod, module_name, virtual_func="__virtual__"):
        """
        Given a loaded module and its default name determine its virtual name

        This function returns a tuple. The first value will be either True or
        False and will indicate if the module should be loaded or not. The
        second value is the determined virtual name, the third an error
        reason when the module is not loaded.
        """
        # The __virtual__ function will return either a True or False value.
        # If it returns a True value it can also set a module level attribute
        # named __virtualname__ with the name that the module should be
        # referred to as.
        #
        # This allows us to have things like the pkg module working on all
        # platforms under the name 'pkg'. It also allows modules to return
        # False if they are not intended to run on the given platform or are
        # missing dependencies.
        error_reason = None
        virtual_fn = getattr(mod, virtual_func, None)
        if not inspect.isfunction(virtual_fn):
            return True, getattr(mod, "__virtualname__", module_name), None
        try:
            virtual = virtual_fn()
            if isinstance(virtual, tuple):
                error_reason = virtual[1]
                virtual = virtual[0]
        except KeyError:
            # Key errors come out of the virtual function when passing
            # in incomplete grains sets, these can be safely ignored
            # and logged to debug, still, it includes the traceback to
            # help debugging.
            log.debug("KeyError when loading %s", module_name, exc_info=True)
            return False, module_name, f"KeyError when loading {module_name}"
        except Exception as exc:  # pylint: disable=broad-except
            error_reason = (
                "Exception raised when processing __virtual__ function"
                " for {}. Module will not be loaded: {}".format(mod.__name__, exc)
            )
            log.error(error_reason, exc_info=True)
            return False, module_name, error_reason

        if not virtual:
            # if __virtual__() evaluates to False then the module
            # wasn't meant for this platform or it's not supposed to
            # load for some other reason.
            if virtual is None:
                log.warning(
                    "%s.__virtual__() is wrongly returning `None`. "
                    "It should either return `True`, `False` or a new "
                    "name. If you're the developer of the module "
                    "'%s', please fix this.",
                    mod.__name__,
                    module_name,
                )
            return False, module_name, error_reason

        virtualname = getattr(mod, "__virtualname__", virtual)
        if virtual is not True and virtualname != virtual:
            # The __virtualname__ attribute does not match what's
            # being returned by the __virtual__() function. This
            # should be considered an error.
            raise LoaderError(
                "The module '{}' is showing some bad usage. Its "
                "__virtualname__ attribute is set to '{}' yet the "
                "__virtual__() function is returning '{}'. These "
                "values should match!".format(mod.__name__, virtualname, virtual)
            )
        if virtual is True:
            virtualname = getattr(mod, "__virtualname__", module_name)
        return True, virtualname, None
